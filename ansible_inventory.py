"""
Generation and parsing of the INI inventory handed to Ansible.

The file is regenerated on every pipeline run from the Terraform output:

    [webservers]
    20.1.2.3 ansible_user=azureuser ansible_ssh_private_key_file=/path/key.pem
"""

import ipaddress
import os

UNGROUPED = "ungrouped"


def render_inventory(group: str, host: str, user: str, key_file: str) -> str:
    return (
        f"[{group}]\n"
        f"{host} ansible_user={user} ansible_ssh_private_key_file={key_file}\n"
    )


def write_inventory(path: str, group: str, host: str, user: str, key_file: str) -> str:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        raise ValueError(f"Not a valid IP address for the inventory: {host!r}")

    path = os.path.abspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w") as f:
        f.write(render_inventory(group, host, user, os.path.abspath(key_file)))
    return path


def parse_inventory(text: str) -> dict[str, list[tuple[str, dict[str, str]]]]:
    """Returns {group: [(host, host_vars), ...]} for an INI inventory."""
    groups: dict[str, list[tuple[str, dict[str, str]]]] = {}
    current = UNGROUPED
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", ";")):
            continue
        if line.startswith("[") and line.endswith("]"):
            current = line[1:-1].strip()
            groups.setdefault(current, [])
            continue

        host, *pairs = line.split()
        host_vars = {}
        for pair in pairs:
            key, _, value = pair.partition("=")
            host_vars[key] = value
        groups.setdefault(current, []).append((host, host_vars))
    return groups


def read_inventory(path: str) -> dict[str, list[tuple[str, dict[str, str]]]]:
    if not os.path.exists(path):
        return {}
    with open(path) as f:
        return parse_inventory(f.read())
