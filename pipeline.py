"""
Sequential deployment pipeline: provision the VM with Terraform, configure it
with Ansible (or pyinfra), then check that the page is served.

Stages run one after another on a single executor. The first failing stage
aborts the run and the troubleshooting checklist is printed.
"""

import ipaddress
import os
import sys
import time
from dataclasses import dataclass, field
from typing import Callable

import ansible_cli
import config
import terraform_cli
from ansible_inventory import write_inventory
from common import RetryError, colors, command_exists, print_color, run_command
from readiness import verify_http, wait_for_ssh
from terraform_cli import TerraformOutputError

BACKENDS = ["ansible", "pyinfra"]

TROUBLESHOOTING = [
    "Check that the ARM_* service principal credentials are valid",
    "Check the Terraform output above for quota or region errors",
    "Check that the network security group allows ports 22 and 80",
    "Check that the SSH private key matches the public key given to Terraform",
    "Check ansible/ansible.log for failed tasks",
    "Check that apache2 is running on the VM: systemctl status apache2",
]


@dataclass
class Options:
    backend: str = "ansible"
    skip_plan: bool = False
    boot_wait: int = config.INITIAL_BOOT_WAIT
    ssh_retries: int = config.SSH_RETRIES
    ssh_delay: int = config.SSH_RETRY_DELAY
    http_retries: int = config.HTTP_RETRIES
    http_delay: int = config.HTTP_RETRY_DELAY
    expected_content: str | None = config.EXPECTED_CONTENT
    inventory: str = config.INVENTORY_FILE
    user: str = config.ANSIBLE_USER
    key_file: str = config.SSH_KEY_FILE
    public_key_file: str = config.SSH_PUBLIC_KEY_FILE

    def __post_init__(self):
        # ansible runs from ansible/, terraform from terraform/
        self.inventory = os.path.abspath(self.inventory)
        self.key_file = os.path.abspath(self.key_file)
        self.public_key_file = os.path.abspath(self.public_key_file)

    def tf_variables(self):
        return terraform_cli.tf_variables(self.user, self.public_key_file)


@dataclass
class Stage:
    name: str
    action: Callable[[dict], None]


@dataclass
class Result:
    ok: bool
    completed: list[str] = field(default_factory=list)
    failed_stage: str | None = None
    context: dict = field(default_factory=dict)


#
# Stage actions
#
def check_tools(options: Options):
    def action(context):
        tools = config.REQUIRED_TOOLS[options.backend]
        missing = [tool for tool in tools if not command_exists(tool)]
        if missing:
            print_color(colors.RED, f"FATAL: Missing tools: {', '.join(missing)}")
            sys.exit(1)
        missing = [
            path
            for path in [options.key_file, options.public_key_file]
            if not os.path.exists(path)
        ]
        if missing:
            print_color(colors.RED, f"FATAL: Missing SSH key files: {', '.join(missing)}")
            sys.exit(1)
        terraform_cli.check_credentials()

    return action


def http_url(host):
    try:
        if ipaddress.ip_address(host).version == 6:
            return f"http://[{host}]"
    except ValueError:
        pass
    return f"http://{host}"


def get_public_ip(context):
    context["public_ip"] = terraform_cli.output_raw(config.TF_OUTPUT_IP)
    # the VM's admin user is whatever Terraform actually created
    context["user"] = terraform_cli.output_raw(config.TF_OUTPUT_USER)
    context["url"] = http_url(context["public_ip"])
    print(f"Public IP: {context['public_ip']}")


def create_inventory(options: Options):
    def action(context):
        context["inventory"] = write_inventory(
            options.inventory,
            config.INVENTORY_GROUP,
            context["public_ip"],
            context.get("user", options.user),
            options.key_file,
        )
        print(f"Inventory written to {context['inventory']}")

    return action


def wait_ssh(options: Options):
    def action(context):
        if options.boot_wait:
            print(f"Waiting {options.boot_wait}s for the VM to boot...")
            time.sleep(options.boot_wait)
        wait_for_ssh(
            context["public_ip"],
            context.get("user", options.user),
            options.key_file,
            retries=options.ssh_retries,
            delay=options.ssh_delay,
        )

    return action


def ansible_ping(context):
    if not ansible_cli.ping(config.INVENTORY_GROUP, context["inventory"]):
        print_color(colors.RED, "FATAL: Ansible could not reach the web server.")
        sys.exit(1)


def configure(options: Options):
    def action(context):
        if options.backend == "ansible":
            ansible_cli.run_playbook(context["inventory"], config.PLAYBOOK_FILE)
        else:
            run_command(
                ["pyinfra", "-y", config.PYINFRA_INVENTORY, config.PYINFRA_DEPLOY],
                env={"INVENTORY_FILE": context["inventory"]},
                cwd=config.PROJECT_DIR,
            )

    return action


def verify(options: Options):
    def action(context):
        verify_http(
            context["url"],
            retries=options.http_retries,
            delay=options.http_delay,
            expected_content=options.expected_content,
        )

    return action


def build_stages(options: Options) -> list[Stage]:
    if options.backend not in BACKENDS:
        raise ValueError(f"Unknown configure backend: {options.backend!r}")

    stages = [
        Stage("Check tools", check_tools(options)),
        Stage("Terraform Init", lambda context: terraform_cli.init()),
    ]
    if options.skip_plan:
        stages.append(
            Stage(
                "Terraform Apply",
                lambda context: terraform_cli.apply(variables=options.tf_variables()),
            )
        )
    else:
        stages += [
            Stage(
                "Terraform Plan",
                lambda context: terraform_cli.plan(
                    config.PLAN_FILE, variables=options.tf_variables()
                ),
            ),
            Stage(
                "Terraform Apply",
                lambda context: terraform_cli.apply(
                    config.PLAN_FILE, variables=options.tf_variables()
                ),
            ),
        ]
    stages += [
        Stage("Get Public IP", get_public_ip),
        Stage("Create Inventory", create_inventory(options)),
        Stage("Wait for SSH", wait_ssh(options)),
    ]
    if options.backend == "ansible":
        stages.append(Stage("Ansible Ping", ansible_ping))
    stages += [
        Stage("Configure Web Server", configure(options)),
        Stage("Verify Deployment", verify(options)),
    ]
    return stages


#
# Post actions
#
def on_success(result: Result) -> None:
    print_color(colors.GREEN, "\n✅ --- Deployment succeeded! --- ✅")
    url = result.context.get("url")
    if url:
        print_color(colors.YELLOW, f"Your site is available at: {url}")


def on_failure(result: Result) -> None:
    print_color(colors.RED, f"\n❌ --- Deployment failed at stage: {result.failed_stage} ---")
    print_color(colors.YELLOW, "Troubleshooting checklist:")
    for item in TROUBLESHOOTING:
        print(f"  - {item}")


def run_stages(stages: list[Stage]) -> Result:
    result = Result(ok=True)
    for stage in stages:
        print_color(colors.BLUE, "\n========================================================")
        print_color(colors.BLUE, f" Stage: {stage.name}")
        print_color(colors.BLUE, "========================================================")
        try:
            stage.action(result.context)
        except (SystemExit, RetryError, TerraformOutputError, ValueError) as e:
            if not isinstance(e, SystemExit):
                print_color(colors.RED, f"FATAL: {e}")
            result.ok = False
            result.failed_stage = stage.name
            return result
        result.completed.append(stage.name)
    return result


def run_pipeline(options: Options, stages: list[Stage] | None = None) -> int:
    if stages is None:
        stages = build_stages(options)
    result = run_stages(stages)
    if result.ok:
        on_success(result)
        return 0
    on_failure(result)
    return 1
