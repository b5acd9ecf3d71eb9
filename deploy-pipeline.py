#!/usr/bin/env python3

"""
Provision the web VM and deploy the static page, end to end.

Stages: Terraform init/plan/apply, read the public IP, write the Ansible
inventory, wait for SSH, configure Apache, then check that the page answers
HTTP 200.

Usage:
    # Full run with the Ansible playbook
    ./deploy-pipeline.py

    # Configure with pyinfra instead, skipping the saved plan
    ./deploy-pipeline.py --backend pyinfra --skip-plan

    # Be more patient with a slow region
    ./deploy-pipeline.py --ssh-retries 20 --ssh-delay 15
"""

import argparse
import sys

from config import (
    EXPECTED_CONTENT,
    HTTP_RETRIES,
    HTTP_RETRY_DELAY,
    INITIAL_BOOT_WAIT,
    SSH_RETRIES,
    SSH_RETRY_DELAY,
)
from pipeline import BACKENDS, Options, run_pipeline


def parse_args(argv=None) -> Options:
    parser = argparse.ArgumentParser(
        description="Provision the web VM and deploy the static page.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="ansible",
        help="Configuration tool used on the VM. Default: ansible.",
    )
    parser.add_argument(
        "--skip-plan",
        action="store_true",
        help="Apply directly without saving a plan file.",
    )
    parser.add_argument(
        "--boot-wait",
        type=int,
        default=INITIAL_BOOT_WAIT,
        help=f"Seconds to wait before the first SSH attempt. Default: {INITIAL_BOOT_WAIT}.",
    )
    parser.add_argument("--ssh-retries", type=int, default=SSH_RETRIES)
    parser.add_argument("--ssh-delay", type=int, default=SSH_RETRY_DELAY)
    parser.add_argument("--http-retries", type=int, default=HTTP_RETRIES)
    parser.add_argument("--http-delay", type=int, default=HTTP_RETRY_DELAY)
    parser.add_argument(
        "--expect",
        default=EXPECTED_CONTENT,
        help="Text that must appear in the served page.",
    )
    args = parser.parse_args(argv)

    if args.ssh_retries < 1 or args.http_retries < 1:
        parser.error("retry counts must be at least 1")

    return Options(
        backend=args.backend,
        skip_plan=args.skip_plan,
        boot_wait=args.boot_wait,
        ssh_retries=args.ssh_retries,
        ssh_delay=args.ssh_delay,
        http_retries=args.http_retries,
        http_delay=args.http_delay,
        expected_content=args.expect,
    )


def main():
    sys.exit(run_pipeline(parse_args()))


if __name__ == "__main__":
    main()
