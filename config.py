import os

# --- Project Layout ---
PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
TERRAFORM_DIR = os.getenv("TERRAFORM_DIR", os.path.join(PROJECT_DIR, "terraform"))
ANSIBLE_DIR = os.getenv("ANSIBLE_DIR", os.path.join(PROJECT_DIR, "ansible"))
APP_DIR = os.path.join(PROJECT_DIR, "app")

ANSIBLE_CONFIG_FILE = os.path.join(ANSIBLE_DIR, "ansible.cfg")
INVENTORY_FILE = os.path.abspath(
    os.getenv("INVENTORY_FILE", os.path.join(ANSIBLE_DIR, "inventory"))
)
PLAYBOOK_FILE = os.path.join(ANSIBLE_DIR, "install_web.yml")
INDEX_HTML = os.path.join(APP_DIR, "index.html")
PYINFRA_DEPLOY = os.path.join(PROJECT_DIR, "deploy-web.py")
PYINFRA_INVENTORY = os.path.join(PROJECT_DIR, "inventory.py")

# --- Terraform ---
PLAN_FILE = "tfplan"
TF_OUTPUT_IP = "public_ip_address"
TF_OUTPUT_USER = "admin_username"

# Service-principal credentials read by the azurerm provider
AZURE_CREDENTIAL_VARS = [
    "ARM_SUBSCRIPTION_ID",
    "ARM_CLIENT_ID",
    "ARM_TENANT_ID",
    "ARM_CLIENT_SECRET",
]

# --- Inventory ---
INVENTORY_GROUP = "webservers"
ANSIBLE_USER = os.getenv("ADMIN_USERNAME", "azureuser")
SSH_KEY_FILE = os.path.abspath(
    os.getenv("SSH_KEY_FILE", os.path.join(PROJECT_DIR, "ssh_key.pem"))
)
# Public half handed to Terraform; ssh_key.pem -> ssh_key.pub
SSH_PUBLIC_KEY_FILE = os.path.abspath(
    os.getenv("SSH_PUBLIC_KEY_FILE", os.path.splitext(SSH_KEY_FILE)[0] + ".pub")
)

# --- Readiness Policy ---
INITIAL_BOOT_WAIT = int(os.getenv("INITIAL_BOOT_WAIT", "30"))
SSH_RETRIES = int(os.getenv("SSH_RETRIES", "10"))
SSH_RETRY_DELAY = int(os.getenv("SSH_RETRY_DELAY", "30"))
SSH_CONNECT_TIMEOUT = 10

HTTP_RETRIES = int(os.getenv("HTTP_RETRIES", "5"))
HTTP_RETRY_DELAY = int(os.getenv("HTTP_RETRY_DELAY", "10"))
HTTP_TIMEOUT = 10

# Optional marker that must appear in the served page
EXPECTED_CONTENT = os.getenv("EXPECTED_CONTENT") or None

# Executables needed on PATH, per configure backend
REQUIRED_TOOLS = {
    "ansible": ["terraform", "ssh", "ansible", "ansible-playbook"],
    "pyinfra": ["terraform", "ssh", "pyinfra"],
}
