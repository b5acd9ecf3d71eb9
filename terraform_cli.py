"""
Thin wrappers around the Terraform CLI.

Every command runs inside the terraform/ directory so that state and the
saved plan live next to the HCL. Input variables are passed as TF_VAR_*
environment variables, which Terraform also honours when applying a saved
plan.
"""

import sys

from common import colors, print_color, require_env, run_command
from config import (
    ANSIBLE_USER,
    AZURE_CREDENTIAL_VARS,
    SSH_PUBLIC_KEY_FILE,
    TERRAFORM_DIR,
)


class TerraformOutputError(Exception):
    pass


def tf_variables(admin_username=ANSIBLE_USER, public_key_file=SSH_PUBLIC_KEY_FILE):
    """Variables shared by Terraform and the SSH/Ansible side."""
    return {
        "admin_username": admin_username,
        "ssh_public_key_path": public_key_file,
    }


def terraform(
    *args, capture_output=False, check=True, cwd=TERRAFORM_DIR, variables=None
):
    env = {f"TF_VAR_{name}": str(value) for name, value in (variables or {}).items()}
    return run_command(
        ["terraform", *args],
        check=check,
        capture_output=capture_output,
        cwd=cwd,
        env=env,
    )


def check_credentials() -> None:
    missing = require_env(AZURE_CREDENTIAL_VARS)
    if missing:
        print_color(
            colors.RED,
            f"FATAL: Missing Azure service principal variables: {', '.join(missing)}",
        )
        sys.exit(1)


def init(cwd=TERRAFORM_DIR) -> None:
    terraform("init", "-input=false", cwd=cwd)


def plan(plan_file: str, variables=None, cwd=TERRAFORM_DIR) -> None:
    terraform(
        "plan", "-input=false", f"-out={plan_file}", cwd=cwd, variables=variables
    )


def apply(plan_file: str | None = None, variables=None, cwd=TERRAFORM_DIR) -> None:
    args = ["apply", "-auto-approve", "-input=false"]
    if plan_file:
        args.append(plan_file)
    terraform(*args, cwd=cwd, variables=variables)


def output_raw(name: str, cwd=TERRAFORM_DIR) -> str:
    """Returns the raw value of a Terraform output."""
    result = terraform("output", "-raw", name, capture_output=True, cwd=cwd)
    value = (result.stdout or "").strip()
    if not value:
        raise TerraformOutputError(f"Terraform output {name!r} is empty")
    return value


def destroy(variables=None, cwd=TERRAFORM_DIR) -> None:
    terraform("destroy", "-auto-approve", "-input=false", cwd=cwd, variables=variables)
