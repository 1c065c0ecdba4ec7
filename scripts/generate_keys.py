#!/usr/bin/env python3
"""
Generate key material for local development.

Creates an RSA key pair standing in for the identity provider's session
signing key plus random webhook secrets, and records them in config/.env.
Optionally mints a session token for a user so the cart API can be
exercised with curl.

Usage:
    python scripts/generate_keys.py
    python scripts/generate_keys.py --token user_123
"""

import argparse
import os
import secrets
import sys
import time
from pathlib import Path

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from dotenv import set_key


def generate_rsa_keys(output_dir: Path, key_size: int = 2048) -> tuple[str, str]:
    """
    Generate RSA key pair for session token signing.

    Returns:
        Tuple of (private_key_path, public_key_path)
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    public_key = private_key.public_key()

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )

    private_path = output_dir / "session_private.pem"
    public_path = output_dir / "session_public.pem"

    with open(private_path, "wb") as f:
        f.write(private_pem)
    os.chmod(private_path, 0o600)  # Restrict permissions

    with open(public_path, "wb") as f:
        f.write(public_pem)

    return str(private_path), str(public_path)


def mint_session_token(private_key_path: Path, user_id: str, ttl_seconds: int = 3600) -> str:
    """Sign a development session token for ``user_id``"""
    with open(private_key_path, "rb") as f:
        private_key = f.read()

    now = int(time.time())
    return jwt.encode(
        {"sub": user_id, "iat": now, "exp": now + ttl_seconds},
        private_key,
        algorithm="RS256",
    )


def write_env(env_file: Path, values: dict[str, str]) -> None:
    """Record generated settings in config/.env, keeping everything else"""
    if not env_file.exists():
        example = env_file.with_name(".env.example")
        env_file.write_text(example.read_text() if example.exists() else "")
    for key, value in values.items():
        set_key(str(env_file), key, value, quote_mode="never")


def main():
    parser = argparse.ArgumentParser(description="Generate development keys and secrets")
    parser.add_argument("--token", metavar="USER_ID", help="Print a session token for USER_ID and exit")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing key pair")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    keys_dir = project_root / "config" / "keys"
    env_file = project_root / "config" / ".env"
    private_path = keys_dir / "session_private.pem"

    if args.token:
        if not private_path.exists():
            print("No session key found; run this script without --token first.", file=sys.stderr)
            sys.exit(1)
        print(mint_session_token(private_path, args.token))
        return

    if private_path.exists() and not args.force:
        print(f"Session key already exists at {private_path} (use --force to replace it)")
        sys.exit(0)

    _, public_path = generate_rsa_keys(keys_dir)
    print(f"Session key pair written to {keys_dir}")

    write_env(env_file, {
        "SESSION_PUBLIC_KEY_PATH": str(Path(public_path).relative_to(project_root)),
        "PAYMENT_WEBHOOK_SECRET": f"whsec_{secrets.token_hex(24)}",
        "IDENTITY_WEBHOOK_SECRET": f"whsec_{secrets.token_hex(24)}",
    })
    print(f"Session key path and webhook secrets recorded in {env_file}")
    print("\nMint a token for a test user with:")
    print("    python scripts/generate_keys.py --token <user_id>")


if __name__ == "__main__":
    main()
