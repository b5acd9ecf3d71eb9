"""
Install Apache and publish app/index.html (pyinfra flavour of
ansible/install_web.yml).

INVENTORY_FILE=$PWD/ansible/inventory pyinfra -y inventory.py deploy-web.py
"""

from pyinfra import host, logger
from pyinfra.facts.server import LsbRelease
from pyinfra.operations import apt, files, server, systemd

from config import INDEX_HTML

WEB_ROOT = "/var/www/html"
WEB_USER = "www-data"


def main() -> None:
    ensure_sudo()
    check_server()
    install_apache()
    publish_page()
    restart_apache()


def ensure_sudo() -> None:
    server.shell(
        name="Install sudo (if not present)",
        commands=[
            "command -v sudo >/dev/null 2>&1 || (apt-get update && apt-get install -y sudo)"
        ],
    )


def check_server() -> None:
    logger.info("Starting Common Prerequisite Checks")
    lsb_info = host.get_fact(LsbRelease)
    is_apt_based = lsb_info["id"].lower() in ["ubuntu", "debian"]
    assert is_apt_based, (
        f"Unsupported OS: {lsb_info['id']}. This script is designed for Debian/Ubuntu."
    )


def install_apache() -> None:
    apt.packages(
        name="Install Apache2",
        packages=["apache2"],
        update=True,
        _sudo=True,
        _retries=3,
        _retry_delay=10,
    )
    systemd.service(
        name="enable/start apache2",
        service="apache2",
        running=True,
        enabled=True,
        _sudo=True,
    )


def publish_page() -> None:
    files.directory(
        name="Create web directory",
        path=WEB_ROOT,
        user=WEB_USER,
        group=WEB_USER,
        mode="755",
        _sudo=True,
    )
    files.put(
        name="Deploy static web application",
        src=INDEX_HTML,
        dest=f"{WEB_ROOT}/index.html",
        user=WEB_USER,
        group=WEB_USER,
        mode="644",
        _sudo=True,
    )


def restart_apache() -> None:
    systemd.service(
        name="Restart Apache2 to apply changes",
        service="apache2",
        running=True,
        restarted=True,
        _sudo=True,
    )
    logger.info(f"Server is ready at: http://{host.name}")


main()
