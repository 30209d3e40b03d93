# src/pkg_token/admin/cli.py

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from .env import settings_from_env
from ..domain.constants import TokenLife
from ..integrations.common.token_factory import create_token_dependencies_from_settings


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-token",
        description="Issue and inspect secret-keyed tokens (secret from PKG_TOKEN_SECRET)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    issue = sub.add_parser("issue", help="Encrypt a new token")
    issue.add_argument("--id", required=True, help="Identity encoded in the token")
    life = issue.add_mutually_exclusive_group()
    life.add_argument(
        "--life",
        "-L",
        help="Named lifetime, e.g. one_min, short, normal, long, forever "
             "(default: PKG_TOKEN_DEFAULT_LIFE or short).",
    )
    life.add_argument(
        "--seconds",
        "-S",
        type=int,
        help="Explicit lifetime in seconds (0 or negative never expires).",
    )
    issue.add_argument(
        "--payload",
        "-P",
        nargs="*",
        help="Payload strings, in order (must not contain '|').",
    )

    inspect = sub.add_parser("inspect", help="Decode a token and print its fields")
    inspect.add_argument("token")

    verify = sub.add_parser("verify", help="Check a token carries ID and is not expired")
    verify.add_argument("--id", required=True)
    verify.add_argument("token")

    return parser.parse_args(args=argv)


def _run(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    tokens = create_token_dependencies_from_settings(settings)

    if args.command == "issue":
        if args.seconds is not None:
            life: TokenLife | int = args.seconds
        elif args.life:
            life = TokenLife.from_name(args.life)
        else:
            life = settings.default_life
        payload = list(args.payload or [])
        if any("|" in p for p in [args.id, *payload]):
            raise ValueError("id and payload must not contain '|'")
        return {"token": tokens.issue(args.id, *payload, life=life)}

    if args.command == "inspect":
        outcome = tokens.inspect(args.token)
        token = outcome.token
        return {
            "status": outcome.status.value,
            "id": token.id,
            "due": token.due,
            "empty": token.is_empty,
            "expired": token.is_expired(),
            "payload": list(token.payload),
        }

    return {"valid": tokens.verify(args.id, args.token)}


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        summary = _run(args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
