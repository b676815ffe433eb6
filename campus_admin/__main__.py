"""Command-line entry point.

Usage::

    python -m campus_admin resources               # list known resource names
    python -m campus_admin login <email> <password>
    python -m campus_admin list <resource> [page]  # one page as JSON
"""

from __future__ import annotations

import asyncio
import json
import sys

from .client import AdminClient
from .config import ClientConfig
from .errors import CampusAdminError, describe_error
from .logging import setup_logging

USAGE = "Usage: python -m campus_admin <resources|login <email> <password>|list <resource> [page]>"


async def _run(args: list[str], config: ClientConfig) -> int:
    async with AdminClient(config) as admin:
        command = args[0]

        if command == "resources":
            print("\n".join(admin.resources.names))
            return 0

        if command == "login" and len(args) == 3:
            session = await admin.auth.login(args[1], args[2])
            print(f"Logged in as {session.user.email if session.user else args[1]}")
            return 0

        if command == "list" and len(args) in (2, 3):
            page = int(args[2]) if len(args) == 3 else 1
            async with admin.query(args[1], {"page": page}) as query:
                result = await query.load()
                if query.error is not None:
                    raise query.error
            print(json.dumps(result.model_dump(mode="json") if result else None, indent=2))
            return 0

    print(USAGE, file=sys.stderr)
    return 1


def main() -> None:
    args = sys.argv[1:]
    if not args or args[0] not in ("resources", "login", "list"):
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    config = ClientConfig()
    setup_logging(json=config.log_json, level=config.log_level)
    try:
        code = asyncio.run(_run(args, config))
    except (CampusAdminError, KeyError, ValueError) as exc:
        message = describe_error(exc, str(exc)) if isinstance(exc, CampusAdminError) else str(exc)
        print(f"Error: {message}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
