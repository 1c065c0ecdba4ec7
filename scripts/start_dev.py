#!/usr/bin/env python3
"""
Development startup script.

Checks that the session key and webhook secrets are in place, then serves
the storefront API with uvicorn.

Usage:
    python scripts/start_dev.py
    python scripts/start_dev.py --port 9000 --no-reload
"""

import argparse
import shutil
import subprocess
import sys
from pathlib import Path

from dotenv import dotenv_values

PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / "config" / ".env"
ENV_EXAMPLE = PROJECT_ROOT / "config" / ".env.example"
REQUIRED_SECRETS = ["PAYMENT_WEBHOOK_SECRET", "IDENTITY_WEBHOOK_SECRET"]


def ensure_env_file() -> bool:
    """Create config/.env from the example when it is missing"""
    if ENV_FILE.exists():
        print("✓ config/.env found")
        return True

    if not ENV_EXAMPLE.exists():
        print("✗ Neither config/.env nor config/.env.example exists")
        return False

    shutil.copy(ENV_EXAMPLE, ENV_FILE)
    print("! Created config/.env from config/.env.example")
    return True


def check_session_key(env: dict) -> bool:
    """The configured public key must be readable"""
    if env.get("SESSION_PUBLIC_KEY"):
        print("✓ Inline session public key configured")
        return True

    key_path = env.get("SESSION_PUBLIC_KEY_PATH")
    if key_path and (PROJECT_ROOT / key_path).exists():
        print(f"✓ Session public key: {key_path}")
        return True

    print("✗ No session public key; every request would be treated as a guest")
    return False


def check_webhook_secrets(env: dict) -> list[str]:
    missing = [name for name in REQUIRED_SECRETS if not env.get(name)]
    if missing:
        print(f"! Webhook secrets not set: {', '.join(missing)} (webhooks will answer 500)")
    else:
        print("✓ Webhook secrets configured")
    return missing


def serve(port: int, reload: bool) -> int:
    """Run uvicorn in a child process until interrupted"""
    command = [
        sys.executable, "-m", "uvicorn",
        "storefront.main:app",
        "--host", "0.0.0.0",
        "--port", str(port),
    ]
    if reload:
        command.append("--reload")

    print(f"\nStorefront on http://localhost:{port} (docs at /docs)")
    print("Press Ctrl+C to stop\n")

    process = subprocess.Popen(command, cwd=PROJECT_ROOT)
    try:
        return process.wait()
    except KeyboardInterrupt:
        process.terminate()
        process.wait()
        print("\nStorefront stopped.")
        return 0


def main():
    parser = argparse.ArgumentParser(description="Run the storefront API for local development")
    parser.add_argument("--port", type=int, default=8001)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    args = parser.parse_args()

    print("Running pre-flight checks...")

    if not ensure_env_file():
        sys.exit(1)

    env = dotenv_values(ENV_FILE)

    if not check_session_key(env):
        answer = input("\nGenerate a session key pair now? [Y/n]: ")
        if answer.lower() == "n":
            sys.exit(1)
        subprocess.run([sys.executable, str(PROJECT_ROOT / "scripts" / "generate_keys.py")], check=True)
        env = dotenv_values(ENV_FILE)

    check_webhook_secrets(env)

    sys.exit(serve(args.port, reload=not args.no_reload))


if __name__ == "__main__":
    main()
