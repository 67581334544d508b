from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from .client import OpenKktClient
from .config import ConfigError
from .exceptions import ApiError


def _read_command(path: str) -> dict[str, Any]:
    if path == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise SystemExit("Command file must contain a JSON object")
    return data


def _print(body: Any) -> None:
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    print(json.dumps(body, indent=2, ensure_ascii=False))


def cmd_state(client: OpenKktClient, args: argparse.Namespace) -> Any:
    return client.get_state_system()


def cmd_open_shift(client: OpenKktClient, args: argparse.Namespace) -> Any:
    return client.open_shift(args.author)


def cmd_close_shift(client: OpenKktClient, args: argparse.Namespace) -> Any:
    return client.close_shift(args.author)


def cmd_print_check(client: OpenKktClient, args: argparse.Namespace) -> Any:
    return client.print_check(_read_command(args.file))


def cmd_print_return(client: OpenKktClient, args: argparse.Namespace) -> Any:
    return client.print_purchase_return(_read_command(args.file))


def cmd_command_status(client: OpenKktClient, args: argparse.Namespace) -> Any:
    return client.get_command_status(args.command_id)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="open-kkt", description="Open KKT SDK smoke CLI")
    parser.add_argument("--env-file", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("state").set_defaults(func=cmd_state)

    open_parser = subparsers.add_parser("open-shift")
    open_parser.add_argument("--author", default="name")
    open_parser.set_defaults(func=cmd_open_shift)

    close_parser = subparsers.add_parser("close-shift")
    close_parser.add_argument("--author", default="name")
    close_parser.set_defaults(func=cmd_close_shift)

    check_parser = subparsers.add_parser("print-check")
    check_parser.add_argument("file", help="JSON file with the receipt command, '-' for stdin")
    check_parser.set_defaults(func=cmd_print_check)

    return_parser = subparsers.add_parser("print-return")
    return_parser.add_argument("file", help="JSON file with the receipt command, '-' for stdin")
    return_parser.set_defaults(func=cmd_print_return)

    status_parser = subparsers.add_parser("command-status")
    status_parser.add_argument("command_id")
    status_parser.set_defaults(func=cmd_command_status)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        with OpenKktClient.from_env(args.env_file) as client:
            _print(args.func(client, args))
    except ConfigError as exc:
        print(json.dumps({"error": "CONFIG_ERROR", "message": str(exc)}, indent=2))
        raise SystemExit(2) from exc
    except ApiError as exc:
        print(
            json.dumps(
                {"error": exc.code, "message": exc.message, "status_code": exc.status_code},
                indent=2,
                ensure_ascii=False,
            )
        )
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
