"""PKCE (Proof Key for Code Exchange) generation for Penn Labs Platform login"""

import hashlib
import secrets
import string
from typing import Optional, Tuple

VERIFIER_LENGTH = 64
VERIFIER_ALPHABET = string.ascii_letters + string.digits


def generate_verifier() -> str:
    """Generate a random 64-character alphanumeric code verifier"""
    return "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(VERIFIER_LENGTH))


def derive_challenge(verifier: str) -> str:
    """Derive the code challenge for ``verifier``

    The platform expects the SHA-256 digest as lowercase hex, not the
    base64url encoding used by RFC 7636.
    """
    return hashlib.sha256(verifier.encode("utf-8")).hexdigest()


class PKCEManager:
    """Holds the PKCE pair for a single login attempt

    PKCE prevents authorization code interception attacks by requiring
    the client to prove it initiated the OAuth flow. The pair lives only in
    memory and is dropped once the attempt finishes.
    """

    def __init__(self):
        self.code_verifier: Optional[str] = None
        self.code_challenge: Optional[str] = None

    def generate_pkce(self) -> Tuple[str, str]:
        """Generate and remember a fresh PKCE pair

        Returns:
            Tuple of (code_verifier, code_challenge)
        """
        self.code_verifier = generate_verifier()
        self.code_challenge = derive_challenge(self.code_verifier)
        return self.code_verifier, self.code_challenge

    def clear_pkce(self) -> None:
        """Forget the current pair"""
        self.code_verifier = None
        self.code_challenge = None
