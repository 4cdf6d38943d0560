"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import httpx
from rich.console import Console

from platform_oauth import AuthError, CredentialManager, OAuthConfig
from utils.storage import RefreshTokenStorage
from cli import auth_handlers
from cli.debug_setup import setup_console
from cli.status_display import show_status

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="platform-login",
        description="Log in to the Penn Labs Platform and manage stored credentials",
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--token-file",
        default=None,
        help="Override the credential file (default: from config)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    login_parser = subparsers.add_parser("login", help="Log in through the browser")
    login_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the login URL instead of opening a browser",
    )
    subparsers.add_parser("status", help="Show stored credential status")
    subparsers.add_parser("token", help="Print a valid access token")
    subparsers.add_parser("whoami", help="Show the logged-in user")
    subparsers.add_parser("logout", help="Erase the stored refresh token")
    return parser


async def run(args: argparse.Namespace, console: Console) -> None:
    """Build the credential manager and dispatch ``args.command``"""
    config = OAuthConfig.from_settings()
    storage = RefreshTokenStorage(args.token_file)

    async with httpx.AsyncClient() as client:
        manager = CredentialManager(config, storage=storage, client=client)

        if args.command == "login":
            await auth_handlers.login(manager, console, open_browser=not args.no_browser)
        elif args.command == "status":
            show_status(manager, console)
        elif args.command == "token":
            await auth_handlers.print_token(manager, console)
        elif args.command == "whoami":
            await auth_handlers.whoami(manager, console)
        elif args.command == "logout":
            auth_handlers.logout(manager, console)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    console = setup_console(args.debug, args.command)

    try:
        asyncio.run(run(args, console))
    except AuthError as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        console.print(f"[red]ERROR:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
