"""
Readiness probes for the freshly provisioned VM.

A new VM accepts TCP on port 22 some time before sshd lets a key in, and
Apache answers some time after the playbook returns, so both checks are
polled with a fixed number of attempts.
"""

import requests

from common import colors, print_color, retry, run_command
from config import (
    HTTP_RETRIES,
    HTTP_RETRY_DELAY,
    HTTP_TIMEOUT,
    SSH_CONNECT_TIMEOUT,
    SSH_RETRIES,
    SSH_RETRY_DELAY,
)


def ssh_probe(host, user, key_file, connect_timeout=SSH_CONNECT_TIMEOUT) -> bool:
    # fmt: off
    command = [
        "ssh",
        "-o", "StrictHostKeyChecking=no",
        "-o", "UserKnownHostsFile=/dev/null",
        "-o", "BatchMode=yes",
        "-o", f"ConnectTimeout={connect_timeout}",
        "-i", key_file,
        f"{user}@{host}",
        "true",
    ]
    # fmt: on
    result = run_command(command, check=False, capture_output=True)
    return result.returncode == 0


def wait_for_ssh(host, user, key_file, retries=SSH_RETRIES, delay=SSH_RETRY_DELAY):
    retry(
        retries,
        lambda: ssh_probe(host, user, key_file),
        delay=delay,
        description=f"SSH to {user}@{host}",
    )
    print_color(colors.GREEN, f"  [✅ SSH is reachable on {host}]")


def http_probe(url, timeout=HTTP_TIMEOUT, expected_status=200, expected_content=None):
    """Returns the response if it matches expectations, else None."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        print_color(colors.RED, f"  - Could not connect to {url}: {e}")
        return None

    if response.status_code != expected_status:
        print_color(
            colors.RED,
            f"  - Expected HTTP {expected_status}, got HTTP {response.status_code}",
        )
        return None
    if expected_content and expected_content not in response.text:
        print_color(colors.RED, f"  - Page does not contain {expected_content!r}")
        return None
    return response


def verify_http(
    url,
    retries=HTTP_RETRIES,
    delay=HTTP_RETRY_DELAY,
    expected_status=200,
    expected_content=None,
):
    def attempt():
        response = http_probe(
            url, expected_status=expected_status, expected_content=expected_content
        )
        # a Response is falsy for 4xx/5xx
        return [response] if response is not None else None

    [response] = retry(retries, attempt, delay=delay, description=f"HTTP GET {url}")
    print_color(colors.GREEN, f"  [✅ {url} answered HTTP {response.status_code}]")
    return response
