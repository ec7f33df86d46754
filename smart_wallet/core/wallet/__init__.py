"""
Owner credentials and backend authentication.

Any object with async `get_address()` and `sign_message(bytes)` can own a
smart wallet; LocalAccountSigner and RemoteSigner are the two built in.
"""

from .auth import AuthDto, SmartWalletAuth
from .signer import Credential, LocalAccountSigner, RemoteSigner, RemoteSignerError

__all__ = [
    "AuthDto",
    "Credential",
    "LocalAccountSigner",
    "RemoteSigner",
    "RemoteSignerError",
    "SmartWalletAuth",
]
