"""OAuth authorization URL construction and redirect handling"""

import logging
import webbrowser
from typing import Optional
from urllib.parse import urlencode, urlparse, parse_qsl

from settings import SCOPES
from .models import OAuthConfig
from .pkce import PKCEManager

logger = logging.getLogger(__name__)


class AuthorizationURLBuilder:
    """Builds Penn Labs Platform authorization URLs with PKCE"""

    def __init__(self, config: OAuthConfig, pkce_manager: Optional[PKCEManager] = None):
        self.config = config
        self.pkce = pkce_manager or PKCEManager()

    def get_authorize_url(self) -> str:
        """Construct the authorize URL for a new login attempt

        A fresh PKCE pair is generated; its verifier stays on ``self.pkce``
        until the code is exchanged.

        Raises:
            MissingCredentials: If the client is not configured
        """
        self.config.require()
        _, code_challenge = self.pkce.generate_pkce()

        params = {
            "response_type": "code",
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "code_challenge_method": "S256",
            "code_challenge": code_challenge,
            "scope": SCOPES,
            "state": "",
        }
        return f"{self.config.authorize_url}?{urlencode(params)}"

    def start_login_flow(self) -> str:
        """Open the authorize URL in the default browser

        Returns:
            Authorization URL that was opened
        """
        auth_url = self.get_authorize_url()
        if not webbrowser.open(auth_url):
            logger.debug("Could not open a browser for the authorization URL")
        return auth_url

    def is_redirect(self, url: str) -> bool:
        """True if ``url`` is a navigation to the configured redirect URI"""
        self.config.require()
        return self.config.redirect_uri in url

    def extract_authorization_code(self, url: str) -> Optional[str]:
        """Pull the authorization code out of a redirect URL

        Uses the ``code`` query parameter when present, otherwise the value
        of the last query parameter.

        Returns:
            The code, or None if ``url`` is not the redirect or has no code
        """
        if not self.is_redirect(url):
            return None

        params = parse_qsl(urlparse(url).query, keep_blank_values=True)
        if not params:
            return None

        code = dict(params).get("code") or params[-1][1]
        return code or None
