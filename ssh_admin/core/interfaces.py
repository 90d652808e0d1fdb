"""
SSH Admin - Core Interfaces
Contrats du module Core: configuration et décodage des clés publiques.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel

from ..network.interfaces import TimeUnit


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


class ValidationSeverity(Enum):
    BLOCKING = "blocking"
    WARNING = "warning"
    INFO = "info"


class ValidationError(BaseModel):
    """Erreur de validation d'une règle de configuration."""

    rule_id: str
    message: str
    location: str
    value: Optional[str] = None
    severity: ValidationSeverity = ValidationSeverity.BLOCKING


class ValidationResult(BaseModel):
    """Résultat de validation d'une configuration."""

    valid: bool
    errors: List[ValidationError] = []
    warnings: List[ValidationError] = []
    checked_at: datetime


class AdminSshConfig(BaseModel):
    """
    Configuration du service SSH d'administration.

    Attributes:
        host: Adresse d'écoute
        port: Port d'écoute
        admin_group_id: Groupe requis pour une connexion par mot de passe
        idle_timeout: Timeout d'inactivité
        idle_timeout_unit: Unité du timeout d'inactivité
        authorized_keys: Chemin de la liste des clés autorisées
        host_keys: Chemins des clés privées d'hôte (transmis au transport)
    """

    host: str = "0.0.0.0"
    port: int = 22224
    admin_group_id: int = 0
    idle_timeout: float = 300
    idle_timeout_unit: TimeUnit = TimeUnit.SECONDS
    authorized_keys: str
    host_keys: List[str] = []


@dataclass(frozen=True)
class PublicKey:
    """
    Clé publique SSH.

    Attributes:
        algorithm: Nom SSH de l'algorithme (ex: "ssh-ed25519")
        blob: Encodage wire SSH de la clé

    L'égalité est structurelle: deux clés décodées par KeyCodec sont égales
    si et seulement si leur encodage canonique est identique.
    """

    algorithm: str
    blob: bytes


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class IConfigLoader(ABC):
    """Charge la configuration du service."""

    @abstractmethod
    def load(self, path: str) -> AdminSshConfig:
        """
        Charge la configuration depuis un fichier.

        Raises:
            ConfigIntegrityError: Fichier absent ou structure invalide
        """
        pass


class IConfigValidator(ABC):
    """Valide la configuration contre les règles du service."""

    @abstractmethod
    def validate(self, config: AdminSshConfig) -> ValidationResult:
        """
        Valide une config contre TOUTES les règles.
        Retourne TOUTES les erreurs (pas fail-fast).
        """
        pass

    @abstractmethod
    def validate_rule(self, rule_id: str, config: AdminSshConfig) -> Optional[ValidationError]:
        """Valide UNE règle spécifique."""
        pass


class IKeyCodec(ABC):
    """Décodage et empreinte des clés publiques SSH."""

    @abstractmethod
    def decode(self, algorithm: str, blob: bytes) -> PublicKey:
        """
        Décode une clé et retourne sa forme canonique.

        Raises:
            KeyDecodeError: Clé invalide ou algorithme non supporté
        """
        pass

    @abstractmethod
    def decode_line(self, line: str) -> PublicKey:
        """Décode une clé au format OpenSSH "<algorithm> <base64> [comment]"."""
        pass

    @abstractmethod
    def fingerprint(self, key: PublicKey) -> str:
        """
        Calcule l'empreinte SHA-256 au format OpenSSH.

        Returns:
            "SHA256:<base64 sans padding>"
        """
        pass


def describe_value(value: Any) -> str:
    """Représentation courte d'une valeur pour les messages de validation."""
    text = str(value)
    return text if len(text) <= 200 else text[:200] + "..."
