import os
import sys
import subprocess
import shutil
import time


# --- ANSI Color Codes for Better Output ---
class colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    GRAY = "\033[90m"
    ENDC = "\033[0m"


class RetryError(Exception):
    """Raised when every attempt of a retried action has failed."""

    def __init__(self, description, attempts):
        super().__init__(f"{description} failed after {attempts} attempt(s)")
        self.description = description
        self.attempts = attempts


def print_color(color, message):
    """Prints a message in a given color."""
    print(f"{color}{message}{colors.ENDC}")


def run_command(
    command,
    check=True,
    command_input=None,
    env=None,
    capture_output=False,
    cwd=None,
):
    """A comprehensive helper to run a shell command and handle errors."""
    display_command = " ".join(str(part) for part in command)
    if command_input:
        display_command += " <<< [INPUT]"
    if cwd:
        display_command += f"  (in {cwd})"
    print_color(colors.BLUE, f"--> Executing: {display_command}")
    try:
        process_env = os.environ.copy()
        if env:
            process_env.update(env)
        result = subprocess.run(
            command,
            input=command_input,
            check=check,
            text=True,
            env=process_env,
            capture_output=capture_output,
            cwd=cwd,
        )
        return result
    except FileNotFoundError:
        print_color(
            colors.RED, f"FATAL: Command '{command[0]}' not found. Is it in your PATH?"
        )
        sys.exit(1)
    except subprocess.CalledProcessError as e:
        if capture_output and e.stderr:
            print_color(colors.RED, f"Stderr:\n{e.stderr}")
        if check:
            print_color(
                colors.RED, f"FATAL: Command failed with return code {e.returncode}."
            )
            sys.exit(1)
        return e


def command_exists(command):
    """Checks if a command is available in the system's PATH."""
    return shutil.which(command) is not None


def require_env(names):
    """Returns the names from `names` that are unset or empty."""
    return [name for name in names if not os.environ.get(name)]


def retry(attempts, action, delay=0, description="action"):
    """
    Calls `action()` up to `attempts` times, sleeping `delay` seconds between
    failed attempts. Returns the first truthy result, raises RetryError if
    none.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        print_color(colors.GRAY, f"  > {description}: attempt {attempt}/{attempts}")
        result = action()
        if result:
            return result
        if attempt < attempts:
            print_color(
                colors.YELLOW, f"  - {description} not ready, retrying in {delay}s..."
            )
            time.sleep(delay)

    raise RetryError(description, attempts)
