"""Status display functionality for CLI"""

from rich.console import Console
from rich.table import Table

from platform_oauth import AccessToken, CredentialManager, CredentialState, Identity

_STATE_STYLES = {
    CredentialState.VALID: "green",
    CredentialState.EXPIRED: "yellow",
    CredentialState.UNAUTHENTICATED: "red",
}


def show_status(manager: CredentialManager, console: Console):
    """
    Display the credential state of ``manager``

    A fresh process has no cached access token, so a stored refresh token
    shows as EXPIRED until the first refresh.
    """
    state = manager.state
    style = _STATE_STYLES[state]

    table = Table(title="Platform Login Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("State", f"[{style}]{state.value.upper()}[/{style}]")
    table.add_row("Refresh Token Stored", "Yes" if manager.has_refresh_token() else "No")
    table.add_row("Client ID", manager.config.client_id or "[red]not set[/red]")
    table.add_row("Redirect URI", manager.config.redirect_uri or "[red]not set[/red]")
    table.add_row("Platform", manager.config.platform_url)
    table.add_row("Credential File", str(manager.storage.token_file))

    console.print(table)


def show_identity(user: Identity, console: Console):
    table = Table(title="Penn Labs Account")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Name", user.full_name)
    table.add_row("Username", user.username)
    table.add_row("Penn ID", str(user.pennid))
    table.add_row("Email", user.email or "-")
    table.add_row("Affiliation", ", ".join(user.affiliation) or "-")

    console.print(table)


def show_token(access_token: AccessToken, console: Console):
    # Bare value on stdout so it can be captured by scripts
    console.print(access_token.value, markup=False, highlight=False, soft_wrap=True)
