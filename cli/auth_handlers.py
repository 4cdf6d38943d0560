"""Authentication handlers for CLI"""

import logging

from rich.console import Console

from platform_oauth import (
    AuthorizationURLBuilder,
    CredentialManager,
    complete_login,
)
from cli.status_display import show_identity, show_token

logger = logging.getLogger(__name__)


async def login(manager: CredentialManager, console: Console, open_browser: bool = True) -> None:
    """
    Run the interactive login flow

    The user completes consent in a browser and pastes back the URL they
    were redirected to; the code in it is exchanged for tokens.

    Args:
        manager: Credential manager that will own the new tokens
        console: Rich console for output
        open_browser: Whether to try opening the authorization URL
    """
    auth_builder = AuthorizationURLBuilder(manager.config)

    console.print("\n[bold]Step 1:[/bold] Open the Penn Labs login page")
    if open_browser:
        auth_url = auth_builder.start_login_flow()
        console.print("If no browser opened, visit this URL manually:")
    else:
        auth_url = auth_builder.get_authorize_url()
        console.print("Visit this URL to log in:")
    console.print(auth_url, soft_wrap=True, markup=False)

    console.print("\n[bold]Step 2:[/bold] Log in with your PennKey and approve access")
    console.print(f"[dim]You will be redirected to {manager.config.redirect_uri}[/dim]")

    console.print("\n[bold]Step 3:[/bold] Paste the full URL you were redirected to")
    redirect_url = input("Redirect URL: ").strip()

    console.print("\n[bold]Step 4:[/bold] Exchanging code for tokens...")
    user = await complete_login(manager, auth_builder, redirect_url)

    console.print(f"\n[green][OK][/green] Logged in as [bold]{user.full_name}[/bold]")
    show_identity(user, console)


async def print_token(manager: CredentialManager, console: Console) -> None:
    """Print a valid access token, refreshing it first if needed"""
    access_token = await manager.get_access_token()
    show_token(access_token, console)


async def whoami(manager: CredentialManager, console: Console) -> None:
    """Print the identity behind the current credentials"""
    access_token = await manager.get_access_token()
    user = await manager.get_user_info(access_token)
    show_identity(user, console)


def logout(manager: CredentialManager, console: Console) -> None:
    """Erase the stored refresh token"""
    had_token = manager.has_refresh_token()
    manager.logout()
    if had_token:
        console.print("[green][OK][/green] Logged out")
    else:
        console.print("[yellow]No stored credentials to clear[/yellow]")
