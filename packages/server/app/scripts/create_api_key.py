"""
Issue an API key for a member of an organization.

Usage:
    python -m app.scripts.create_api_key --org-id <uuid> --user-id <uuid> --name "laptop"

The plaintext key is printed once and cannot be recovered afterwards.
"""

import argparse
import asyncio
import sys
import uuid

from app.core.database import get_session_context
from app.services.api_keys import ApiKeyError, issue_api_key


async def create_api_key(org_id: uuid.UUID, user_id: uuid.UUID, name: str) -> str:
    async with get_session_context() as session:
        api_key, plaintext_key = await issue_api_key(user_id, org_id, name, session)

    print("--- API KEY ---")
    print(f"ID: {api_key.id}")
    print(f"Name: {api_key.name}")
    print(f"Prefix: {api_key.key_prefix}")
    print(f"API KEY: {plaintext_key}")
    print("Store this key now; it will not be shown again.")
    print("---------------")
    return plaintext_key


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Issue a PromptMesh API key.")
    parser.add_argument("--org-id", required=True, type=uuid.UUID, help="Organization ID")
    parser.add_argument("--user-id", required=True, type=uuid.UUID, help="Owning user ID")
    parser.add_argument("--name", required=True, help="Label for the key")
    args = parser.parse_args(argv)

    try:
        asyncio.run(create_api_key(args.org_id, args.user_id, args.name))
    except ApiKeyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
