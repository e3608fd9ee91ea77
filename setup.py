#!/usr/bin/env python
"""
echobot development setup script.
Creates the virtual environment, installs dependencies and writes a .env template.
"""

import platform
import shutil
import subprocess
from pathlib import Path

ENV_TEMPLATE = """# Core settings
PROJECT_NAME=echobot
ENVIRONMENT=dev
LOG_LEVEL=INFO
LOG_DIR=logs
HOST=127.0.0.1
PORT=8000

# WhatsApp Cloud API - Replace with your credentials
WHATSAPP_TOKEN=your-whatsapp-token
WHATSAPP_PHONE_NUMBER_ID=your-phone-number-id
WHATSAPP_VERIFY_TOKEN=your-verify-token
WHATSAPP_API_VERSION=v17.0
MEDIA_FOLDER=myFolder

# OpenAI - used by echobot-generate
OPENAI_API_KEY=your-openai-key
OPENAI_MODEL=gpt-4o-mini
OPENAI_TIMEOUT=600.0
OPENAI_MAX_RETRIES=2
"""


def print_step(message):
    """Print a formatted step message"""
    print(f"\n\033[1;34m>>> {message}\033[0m")


def run_command(command, cwd=None):
    """Run a shell command and report failures"""
    print(f"Running: {command}")
    result = subprocess.run(
        command, shell=True, cwd=cwd, capture_output=True, text=True
    )
    if result.returncode != 0:
        print(f"Error: {result.stderr}")
        return False
    return True


def activate_path():
    if platform.system() == "Windows":
        return ".venv\\Scripts\\activate"
    return ".venv/bin/activate"


def setup_env():
    """Set up the virtual environment"""
    print_step("Setting up Python virtual environment")

    if not Path(".venv").exists() and not run_command("python -m venv .venv"):
        return False

    if not Path(activate_path()).exists():
        print(f"Error: Activation script not found at {activate_path()}")
        return False

    print(f"Virtual environment created. Activate with:\nsource {activate_path()}")
    return True


def install_dependencies():
    """Install the project with its test extra"""
    print_step("Installing dependencies")

    if shutil.which("uv"):
        return run_command("uv sync --extra test")
    return run_command("pip install -e .[test]")


def create_env_file():
    """Create a template .env file if it doesn't exist"""
    print_step("Creating .env file template")

    if Path(".env").exists():
        print(".env file already exists, skipping")
        return True

    Path(".env.template").write_text(ENV_TEMPLATE)
    shutil.copy(".env.template", ".env")
    print("Created .env file. Please update it with your actual credentials.")
    return True


def main():
    """Main setup function"""
    print("\n\033[1;32m=== echobot Development Setup ===\033[0m\n")

    steps = [setup_env, install_dependencies, create_env_file]

    for step in steps:
        if not step():
            print("\n\033[1;31mSetup failed. Please resolve the issues and try again.\033[0m")
            return

    print("\n\033[1;32mSetup completed successfully!\033[0m")
    print("\nTo start the webhook service:")
    print(f"1. source {activate_path()}")
    print("2. python run.py")
    print("\nTo generate text:")
    print('   echobot-generate "Write a story about a magic backpack."')


if __name__ == "__main__":
    main()
