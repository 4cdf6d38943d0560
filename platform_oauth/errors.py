"""Errors raised by the Penn Labs Platform OAuth client

Every failure of a credential operation is reported as a subclass of
:class:`AuthError`. Transport and decoding errors never escape raw; they are
chained as ``__cause__`` of the error that replaces them.
"""

from typing import Optional


class AuthError(Exception):
    """Base class for credential lifecycle failures"""


class MissingCredentials(AuthError):
    """The client ID or redirect URI has not been configured"""


class NoRefreshToken(AuthError):
    """A refresh was needed but no refresh token is stored"""


class RefreshTokenInvalid(AuthError):
    """The platform rejected the stored refresh token with ``invalid_grant``

    The token has been erased; the user must log in again.
    """


class PlatformAuthError(AuthError):
    """Network failure, timeout, or an unexpected or malformed platform response"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
