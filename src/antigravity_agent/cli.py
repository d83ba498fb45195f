"""
Command line front end: antigravity-agent <command>
"""

import argparse
import asyncio
import json
import sys

from .commands import CommandError, Commands
from .config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="antigravity-agent",
        description="Locate, inspect and close the Antigravity app.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("info", help="Platform and Antigravity data locations")
    sub.add_parser("find", help="Candidate install directories")
    validate = sub.add_parser("validate", help="Check a directory contains state.vscdb")
    validate.add_argument("path")
    sub.add_parser("resolve", help="Resolve the Antigravity executable (Windows)")
    persist = sub.add_parser("persist", help="Remember an Antigravity executable (Windows)")
    persist.add_argument("path")
    sub.add_parser("running", help="Whether Antigravity is running")
    sub.add_parser("kill", help="Force-close running Antigravity processes")
    tray = sub.add_parser("tray", help="Show or change hide-to-tray on close")
    tray.add_argument("state", nargs="?", choices=["on", "off", "status"], default="status")
    return parser


async def dispatch(commands: Commands, args: argparse.Namespace):
    if args.command == "info":
        return await commands.get_platform_info()
    if args.command == "find":
        return await commands.find_installations()
    if args.command == "validate":
        return await commands.validate_path(args.path)
    if args.command == "resolve":
        return await commands.resolve_executable_path()
    if args.command == "persist":
        await commands.persist_executable_path(args.path)
        # only Windows keeps the executable path; elsewhere persist is a no-op
        if not commands.resolver.platform.caches_executable_path:
            return {"saved": None}
        return {"saved": args.path}
    if args.command == "running":
        return await commands.is_process_running()
    if args.command == "kill":
        return await commands.terminate_target()
    if args.command == "tray":
        if args.state == "status":
            return {"tray_enabled": await commands.is_tray_enabled()}
        return {"tray_enabled": await commands.set_tray_enabled(args.state == "on")}
    raise CommandError(f"unknown command: {args.command}")


def main(argv: list[str] | None = None, commands: Commands | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    try:
        result = asyncio.run(dispatch(commands or Commands(), args))
    except CommandError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
