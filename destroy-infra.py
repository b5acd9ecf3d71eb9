#!/usr/bin/env python3

"""
Tear down everything created by deploy-pipeline.py.

Usage:
    ./destroy-infra.py
"""

import os

import terraform_cli
from common import colors, print_color
from config import INVENTORY_FILE, PLAN_FILE, TERRAFORM_DIR


def main():
    terraform_cli.check_credentials()
    terraform_cli.init()
    terraform_cli.destroy(terraform_cli.tf_variables())

    for path in [INVENTORY_FILE, os.path.join(TERRAFORM_DIR, PLAN_FILE)]:
        if os.path.exists(path):
            os.remove(path)

    print_color(colors.GREEN, "✅ --- Infrastructure destroyed. --- ✅")


if __name__ == "__main__":
    main()
