import importlib.util
import os

import pytest

import inventory
from config import PROJECT_DIR


def load_script(filename):
    path = os.path.join(PROJECT_DIR, filename)
    spec = importlib.util.spec_from_file_location(filename.replace("-", "_")[:-3], path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_deploy_pipeline_arguments():
    script = load_script("deploy-pipeline.py")
    options = script.parse_args(
        ["--backend", "pyinfra", "--skip-plan", "--ssh-retries", "20", "--expect", "Hello"]
    )
    assert options.backend == "pyinfra"
    assert options.skip_plan is True
    assert options.ssh_retries == 20
    assert options.expected_content == "Hello"


def test_deploy_pipeline_rejects_zero_retries():
    script = load_script("deploy-pipeline.py")
    with pytest.raises(SystemExit):
        script.parse_args(["--http-retries", "0"])


def test_pyinfra_hosts_from_ansible_inventory():
    groups = {
        "webservers": [
            (
                "20.1.2.3",
                {
                    "ansible_user": "azureuser",
                    "ansible_ssh_private_key_file": "/k.pem",
                    "ansible_port": "2222",
                },
            )
        ],
        "other": [("10.0.0.1", {})],
    }
    [(name, data)] = inventory.pyinfra_hosts(groups)
    assert name == "20.1.2.3"
    assert data["ssh_user"] == "azureuser"
    assert data["ssh_key"] == "/k.pem"
    assert data["ssh_port"] == 2222
    assert data["_sudo"] is True


def test_pyinfra_hosts_empty_inventory():
    assert inventory.pyinfra_hosts({}) == []


def test_destroy_infra(monkeypatch, tmp_path, azure_env):
    script = load_script("destroy-infra.py")
    calls = []
    inventory_file = tmp_path / "inventory"
    inventory_file.write_text("[webservers]\n")
    (tmp_path / "tfplan").write_text("plan")
    monkeypatch.setattr(script, "INVENTORY_FILE", str(inventory_file))
    monkeypatch.setattr(script, "TERRAFORM_DIR", str(tmp_path))
    monkeypatch.setattr(script.terraform_cli, "init", lambda: calls.append("init"))
    monkeypatch.setattr(
        script.terraform_cli, "destroy", lambda variables: calls.append(("destroy", variables))
    )

    script.main()

    assert calls[0] == "init"
    assert calls[1][0] == "destroy"
    assert set(calls[1][1]) == {"admin_username", "ssh_public_key_path"}
    assert not inventory_file.exists()
    assert not (tmp_path / "tfplan").exists()


def test_destroy_infra_without_credentials(monkeypatch, azure_env):
    script = load_script("destroy-infra.py")
    monkeypatch.delenv("ARM_CLIENT_ID")
    monkeypatch.setattr(
        script.terraform_cli, "destroy", lambda variables: pytest.fail("destroyed")
    )
    with pytest.raises(SystemExit):
        script.main()
