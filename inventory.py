# inventory.py
# See: https://docs.pyinfra.com/en/3.x/inventory-data.html
#
# Reuses the INI inventory written by the pipeline so that pyinfra and
# Ansible target the same host with the same credentials.

import os

from ansible_inventory import read_inventory
from config import INVENTORY_FILE, INVENTORY_GROUP

_inventory_file = os.getenv("INVENTORY_FILE", INVENTORY_FILE)

__all__ = ["webservers"]


def pyinfra_hosts(groups, group=INVENTORY_GROUP):
    """Maps Ansible host variables onto pyinfra connection data."""
    hosts = []
    for name, host_vars in groups.get(group, []):
        data = {"_sudo": True}
        if "ansible_user" in host_vars:
            data["ssh_user"] = host_vars["ansible_user"]
        if "ansible_ssh_private_key_file" in host_vars:
            data["ssh_key"] = host_vars["ansible_ssh_private_key_file"]
        if "ansible_port" in host_vars:
            data["ssh_port"] = int(host_vars["ansible_port"])
        data["ssh_known_hosts_file"] = "/dev/null"
        data["ssh_strict_host_key_checking"] = "no"
        hosts.append((name, data))
    return hosts


webservers = pyinfra_hosts(read_inventory(_inventory_file))
