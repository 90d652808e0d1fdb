"""
Server - Transport Adapter

Branche les authentificateurs sur les callbacks paramiko d'une connexion.

paramiko appelle check_auth_publickey() deux fois pour une même clé
(sonde sans signature, puis tentative signée); la déduplication de
l'audit est assurée par SessionState.
"""

import threading
from typing import Optional

import paramiko

from ..auth.interfaces import IPasswordAuthenticator, IPublicKeyAuthenticator, SessionState
from ..core.interfaces import PublicKey


class AdminServerInterface(paramiko.ServerInterface):
    """
    Callbacks serveur d'une connexion SSH d'administration.

    Attributes:
        session: Session de la connexion
        shell_requested: Levé quand le client demande un shell
    """

    def __init__(
        self,
        session: SessionState,
        password_authenticator: Optional[IPasswordAuthenticator],
        publickey_authenticator: Optional[IPublicKeyAuthenticator],
        shell_available: bool = True,
    ) -> None:
        super().__init__()
        self.session = session
        self._password_authenticator = password_authenticator
        self._publickey_authenticator = publickey_authenticator
        self._shell_available = shell_available
        self.shell_requested = threading.Event()

    def get_allowed_auths(self, username: str) -> str:
        methods = []
        if self._publickey_authenticator is not None:
            methods.append("publickey")
        if self._password_authenticator is not None:
            methods.append("password")
        return ",".join(methods)

    def check_auth_password(self, username: str, password: str) -> int:
        if self._password_authenticator is None:
            return paramiko.AUTH_FAILED

        ok = self._password_authenticator.authenticate(username, password, self.session, self.session.remote)
        return paramiko.AUTH_SUCCESSFUL if ok else paramiko.AUTH_FAILED

    def check_auth_publickey(self, username: str, key: paramiko.PKey) -> int:
        if self._publickey_authenticator is None:
            return paramiko.AUTH_FAILED

        presented = PublicKey(algorithm=key.get_name(), blob=key.asbytes())
        ok = self._publickey_authenticator.authenticate(username, presented, self.session, self.session.remote)
        return paramiko.AUTH_SUCCESSFUL if ok else paramiko.AUTH_FAILED

    def check_channel_request(self, kind: str, chanid: int) -> int:
        if kind == "session" and self.session.authenticated:
            return paramiko.OPEN_SUCCEEDED
        return paramiko.OPEN_FAILED_ADMINISTRATIVELY_PROHIBITED

    def check_channel_shell_request(self, channel: paramiko.Channel) -> bool:
        if not self._shell_available or not self.session.authenticated:
            return False
        self.shell_requested.set()
        return True

    def check_channel_pty_request(self, channel, term, width, height, pixelwidth, pixelheight, modes) -> bool:
        return self.session.authenticated
