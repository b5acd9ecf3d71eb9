from common import run_command
from config import ANSIBLE_CONFIG_FILE, ANSIBLE_DIR


def ansible_env():
    return {"ANSIBLE_CONFIG": ANSIBLE_CONFIG_FILE}


def ping(group: str, inventory: str) -> bool:
    """Runs the Ansible ping module against `group`."""
    result = run_command(
        ["ansible", group, "-i", inventory, "-m", "ping"],
        check=False,
        env=ansible_env(),
        cwd=ANSIBLE_DIR,
    )
    return result.returncode == 0


def run_playbook(inventory: str, playbook: str, extra_vars=None) -> None:
    command = ["ansible-playbook", "-i", inventory, playbook]
    for key, value in (extra_vars or {}).items():
        command += ["-e", f"{key}={value}"]
    run_command(command, env=ansible_env(), cwd=ANSIBLE_DIR)
