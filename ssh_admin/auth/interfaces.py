"""
Auth - Interfaces

Définit les contrats pour l'authentification des connexions SSH
d'administration (mot de passe et clé publique) et la restriction
d'hôte de type OpenSSH `from=`.
Toute implémentation DOIT respecter ces interfaces.
"""

import ipaddress
import socket
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from functools import cached_property
from typing import Iterator, Optional, Tuple, Union

from ..core.interfaces import PublicKey
from ..network.idle_timeout import IdleTimeoutPolicy


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RemoteEndpoint:
    """
    Extrémité distante d'une connexion.

    Attributes:
        address: Adresse IP littérale du client
        port: Port source (optionnel)
        resolved_hostname: Nom résolu (best effort, optionnel)
        reverse_lookup: Résolution inverse différée au premier accès à hostname
    """

    address: str
    port: Optional[int] = None
    resolved_hostname: Optional[str] = None
    reverse_lookup: bool = field(default=False, repr=False, compare=False)

    @property
    def socket_description(self) -> str:
        """Description "adresse:port" pour les logs (IPv6 entre crochets)."""
        if self.port is None:
            return self.address
        if ":" in self.address:
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"

    @cached_property
    def hostname(self) -> Optional[str]:
        """
        Nom de l'extrémité.

        resolved_hostname s'il est connu; sinon, si reverse_lookup, résolution
        inverse au premier accès (best effort, un échec donne None).
        """
        if self.resolved_hostname is not None or not self.reverse_lookup:
            return self.resolved_hostname
        try:
            return socket.gethostbyaddr(self.address)[0]
        except (OSError, UnicodeError):
            return None

    @classmethod
    def lazy(cls, address: str, port: Optional[int] = None) -> "RemoteEndpoint":
        """Extrémité dont le nom n'est résolu que si un motif de nom est évalué."""
        return cls(address=address, port=port, reverse_lookup=True)


@dataclass(frozen=True)
class PasswordCredential:
    """Credential mot de passe. Le secret n'apparaît jamais dans repr()."""

    username: str
    secret: str = field(repr=False)
    origin: Optional[str] = None

    def with_origin(self, remote: RemoteEndpoint) -> "PasswordCredential":
        """Copie portant l'adresse d'origine de la connexion."""
        return replace(self, origin=remote.address)


@dataclass(frozen=True)
class PublicKeyCredential:
    """Credential clé publique."""

    username: str
    key: PublicKey
    origin: Optional[str] = None

    def with_origin(self, remote: RemoteEndpoint) -> "PublicKeyCredential":
        """Copie portant l'adresse d'origine de la connexion."""
        return replace(self, origin=remote.address)


Credential = Union[PasswordCredential, PublicKeyCredential]


@dataclass(frozen=True)
class HostPattern:
    """
    Élément d'une clause `from="..."`.

    Attributes:
        negated: True si préfixé par "!"
        text: Motif sans le "!" (CIDR, glob ou nom exact)
    """

    negated: bool
    text: str

    @classmethod
    def parse(cls, item: str) -> "HostPattern":
        item = item.strip()
        if item.startswith("!"):
            return cls(negated=True, text=item[1:])
        return cls(negated=False, text=item)


# Séquence ordonnée de motifs; None = aucune restriction
HostRestriction = Tuple[HostPattern, ...]


class Outcome(Enum):
    """Résultat de l'évaluation d'un motif."""

    ALLOW = "allow"
    DENY = "deny"
    DEFER = "defer"


@dataclass(frozen=True)
class AuthorizedEntry:
    """
    Ligne valide de la liste des clés autorisées.

    Attributes:
        restriction: Clause from= parsée (None = pas de restriction)
        algorithm: Algorithme annoncé sur la ligne
        key_blob: Matériel de clé décodé du base64 (non encore validé)
        comment: Commentaire de fin de ligne
        line_number: Numéro de ligne (1-based) pour les logs
    """

    restriction: Optional[HostRestriction]
    algorithm: str
    key_blob: bytes = field(repr=False)
    comment: Optional[str] = None
    line_number: int = 0


class Identity(ABC):
    """Identité résolue par le backend de login."""

    @property
    @abstractmethod
    def username(self) -> str:
        pass

    @abstractmethod
    def has_group(self, group_id: int) -> bool:
        """True si l'identité est membre du groupe."""
        pass


class IdentityBackendError(Exception):
    """Erreur du backend d'identité."""

    pass


class LoginFailedError(IdentityBackendError):
    """Credential rejeté par le backend."""

    pass


class SessionStateError(Exception):
    """Transition d'état de session invalide."""

    pass


@dataclass
class SessionState:
    """
    État d'authentification d'une connexion SSH.

    Deux états: non authentifié → authentifié. La transition est unique,
    sans retour, et passe par mark_authenticated() (check-and-set atomique).

    Attributes:
        session_id: Identifiant unique
        remote: Extrémité distante
        idle_policy: Timeouts transmis au transport
        created_at: Horodatage création
    """

    remote: RemoteEndpoint
    idle_policy: IdleTimeoutPolicy
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _authenticated: bool = field(default=False, init=False, repr=False)
    _username: Optional[str] = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    @property
    def username(self) -> Optional[str]:
        return self._username

    def mark_authenticated(self, username: str) -> bool:
        """
        Passe la session à l'état authentifié.

        Args:
            username: Utilisateur authentifié

        Returns:
            True si CET appel a effectué la transition, False si déjà authentifiée

        Raises:
            SessionStateError: username vide
        """
        if not username:
            raise SessionStateError("username est obligatoire")

        with self._lock:
            if self._authenticated:
                return False
            self._authenticated = True
            self._username = username
            return True


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class IHostAccessPolicy(ABC):
    """Évaluation pure d'une restriction d'hôte."""

    @abstractmethod
    def evaluate(self, restriction: Optional[HostRestriction], remote: RemoteEndpoint) -> bool:
        """
        Args:
            restriction: Motifs ordonnés (None = aucune restriction)
            remote: Extrémité distante

        Returns:
            True si autorisé
        """
        pass


class IAuthorizedEntryStore(ABC):
    """Source des entrées de clés autorisées."""

    @abstractmethod
    def load(self) -> Iterator[AuthorizedEntry]:
        """
        Séquence paresseuse, relue à chaque appel.

        Les lignes invalides sont ignorées; une source absente donne
        une séquence vide.
        """
        pass


class IIdentityBackend(ABC):
    """Backend de login externe (mot de passe → identité)."""

    @abstractmethod
    def login(self, credential: Credential) -> Identity:
        """
        Raises:
            LoginFailedError: Credential rejeté
            IdentityBackendError: Backend indisponible
        """
        pass


class IPublicKeyAuthenticator(ABC):
    """Authentification par clé publique."""

    @abstractmethod
    def authenticate(self, username: str, key: PublicKey, session: SessionState, remote: RemoteEndpoint) -> bool:
        pass


class IPasswordAuthenticator(ABC):
    """Authentification par mot de passe."""

    @abstractmethod
    def authenticate(self, username: str, password: str, session: SessionState, remote: RemoteEndpoint) -> bool:
        pass


class ISessionManager(ABC):
    """Cycle de vie des sessions SSH (ouverture/fermeture de connexion)."""

    @abstractmethod
    def open_session(self, remote: RemoteEndpoint) -> SessionState:
        """Crée la session d'une nouvelle connexion (audit connect)."""
        pass

    @abstractmethod
    def close_session(self, session_id: str) -> bool:
        """
        Ferme la session (audit disconnect, une seule fois).

        Returns:
            True si fermée, False si inexistante ou déjà fermée
        """
        pass

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[SessionState]:
        pass


def parse_ip(address: str) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    """
    Parse une adresse IP littérale; les adresses IPv4-mapped sont dé-mappées.

    Returns:
        Adresse ou None si invalide
    """
    try:
        ip = ipaddress.ip_address(address.strip())
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip
