"""
Server - Admin SSH Server

Démarrage/arrêt du service SSH d'administration et gestion d'une
connexion par thread.

Règles:
    - Échec de chargement des clés d'hôte ou d'écoute → AdminServerError
      (pas de nouvelle tentative)
    - Arrêt best effort: erreurs et attentes interrompues loggées, jamais propagées
    - Keepalive transport = timeout d'inactivité, lecture canal = 2 x inactivité
"""

import socket
import threading
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

import paramiko
from paramiko.pkey import UnknownKeyType

from ..auth.interfaces import (
    IPasswordAuthenticator,
    IPublicKeyAuthenticator,
    ISessionManager,
    RemoteEndpoint,
    SessionState,
)
from ..core.interfaces import AdminSshConfig
from ..logging import StructuredLogger
from .transport import AdminServerInterface


ShellHandler = Callable[[paramiko.Channel, SessionState], None]


class AdminServerError(Exception):
    """Échec de démarrage du service SSH."""

    pass


class AdminSshServer:
    """
    Service SSH d'administration (paramiko).

    Example:
        server = AdminSshServer(config, sessions, password_auth, publickey_auth, logger, shell_handler)
        server.start()
        ...
        server.stop()
    """

    ACCEPT_POLL_SECONDS: float = 1.0
    CHANNEL_POLL_SECONDS: float = 1.0
    JOIN_TIMEOUT_SECONDS: float = 5.0
    LISTEN_BACKLOG: int = 100

    def __init__(
        self,
        config: AdminSshConfig,
        session_manager: ISessionManager,
        password_authenticator: Optional[IPasswordAuthenticator],
        publickey_authenticator: Optional[IPublicKeyAuthenticator],
        logger: StructuredLogger,
        shell_handler: Optional[ShellHandler] = None,
    ) -> None:
        self.config = config
        self._session_manager = session_manager
        self._password_authenticator = password_authenticator
        self._publickey_authenticator = publickey_authenticator
        self._logger = logger
        self._shell_handler = shell_handler

        self._host_keys: List[paramiko.PKey] = []
        self._socket: Optional[socket.socket] = None
        self._accept_thread: Optional[threading.Thread] = None
        self._workers: Set[threading.Thread] = set()
        self._transports: Set[paramiko.Transport] = set()
        self._lock = threading.Lock()
        self._stopping = threading.Event()

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Adresse d'écoute effective (None si arrêté)."""
        if self._socket is None:
            return None
        sockname = self._socket.getsockname()
        return sockname[0], sockname[1]

    @property
    def running(self) -> bool:
        return self._accept_thread is not None and self._accept_thread.is_alive()

    def start(self) -> None:
        """
        Charge les clés d'hôte, ouvre l'écoute et lance le thread d'acceptation.

        Raises:
            AdminServerError: Clé d'hôte absente/illisible, écoute impossible,
                serveur déjà démarré
        """
        if self.running:
            raise AdminServerError("SSH admin server already started")

        self._host_keys = self._load_host_keys()
        self._socket = self._listen()
        self._stopping.clear()

        self._accept_thread = threading.Thread(target=self._accept_loop, name="ssh-admin-accept", daemon=True)
        self._accept_thread.start()

        host, port = self.address
        self._logger.info("SSH admin interface started", host=host, port=port)

    def stop(self) -> None:
        """Arrête l'écoute et les connexions en cours (best effort)."""
        self._stopping.set()

        if self._socket is not None:
            try:
                self._socket.close()
            except OSError as e:
                self._logger.warn("SSH failure during shutdown", error=str(e))
            self._socket = None

        with self._lock:
            transports = list(self._transports)
            workers = list(self._workers)

        for transport in transports:
            transport.close()

        threads = workers + ([self._accept_thread] if self._accept_thread is not None else [])
        for thread in threads:
            if thread is threading.current_thread():
                continue
            try:
                thread.join(self.JOIN_TIMEOUT_SECONDS)
            except KeyboardInterrupt:
                self._logger.warn("Interrupted while waiting for SSH threads", thread=thread.name)
                break
            if thread.is_alive():
                self._logger.warn("SSH thread did not terminate", thread=thread.name)

        self._accept_thread = None
        self._logger.info("SSH admin interface stopped")

    def _load_host_keys(self) -> List[paramiko.PKey]:
        if not self.config.host_keys:
            raise AdminServerError("No host key configured")

        keys = []
        for path in self.config.host_keys:
            if not Path(path).is_file():
                raise AdminServerError(f"Host key not found: {path}")
            try:
                keys.append(paramiko.PKey.from_path(path))
            except (paramiko.SSHException, UnknownKeyType, OSError, ValueError, TypeError) as e:
                raise AdminServerError(f"Cannot load host key {path}: {e}") from e
        return keys

    def _listen(self) -> socket.socket:
        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        try:
            sock = socket.create_server((host, port), family=family, backlog=self.LISTEN_BACKLOG)
        except OSError as e:
            raise AdminServerError(f"Cannot listen on {host}:{port}: {e}") from e

        sock.settimeout(self.ACCEPT_POLL_SECONDS)
        return sock

    def _accept_loop(self) -> None:
        sock = self._socket
        while not self._stopping.is_set() and sock is not None:
            try:
                client, addr = sock.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._stopping.is_set():
                    self._logger.error("SSH accept failed", error=str(e))
                break

            worker = threading.Thread(
                target=self._handle_connection,
                args=(client, addr),
                name=f"ssh-admin-{addr[0]}:{addr[1]}",
                daemon=True,
            )
            with self._lock:
                self._workers.add(worker)
            worker.start()

    def _handle_connection(self, client: socket.socket, addr: Tuple) -> None:
        remote = RemoteEndpoint.lazy(addr[0], addr[1])
        session = self._session_manager.open_session(remote)
        transport: Optional[paramiko.Transport] = None
        try:
            transport = paramiko.Transport(client)
            with self._lock:
                self._transports.add(transport)
            for key in self._host_keys:
                transport.add_server_key(key)
            transport.set_keepalive(max(1, int(session.idle_policy.idle_timeout_seconds())))

            server = AdminServerInterface(
                session,
                self._password_authenticator,
                self._publickey_authenticator,
                shell_available=self._shell_handler is not None,
            )
            transport.start_server(server=server)

            channel = self._wait_for_channel(transport)
            if channel is None:
                return

            while not server.shell_requested.wait(self.CHANNEL_POLL_SECONDS):
                if self._stopping.is_set() or not transport.is_active():
                    return

            channel.settimeout(session.idle_policy.read_timeout_seconds())
            self._shell_handler(channel, session)
        except (paramiko.SSHException, EOFError, OSError) as e:
            self._logger.debug("SSH connection terminated", correlation_id=session.session_id, error=str(e))
        finally:
            if transport is not None:
                transport.close()
                with self._lock:
                    self._transports.discard(transport)
            else:
                client.close()
            self._session_manager.close_session(session.session_id)
            with self._lock:
                self._workers.discard(threading.current_thread())

    def _wait_for_channel(self, transport: paramiko.Transport) -> Optional[paramiko.Channel]:
        while not self._stopping.is_set() and transport.is_active():
            channel = transport.accept(timeout=self.CHANNEL_POLL_SECONDS)
            if channel is not None:
                return channel
        return None
