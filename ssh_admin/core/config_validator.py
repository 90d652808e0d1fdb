"""
SSH Admin - Config Validator Implementation
Valide la configuration du service avant démarrage.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from .interfaces import (
    AdminSshConfig,
    IConfigValidator,
    ValidationError,
    ValidationResult,
    ValidationSeverity,
    describe_value,
)


class ConfigValidator(IConfigValidator):
    """Validation de la configuration contre les règles du service."""

    def __init__(self) -> None:
        self._validators: Dict[str, Callable[[AdminSshConfig], Optional[ValidationError]]] = {
            "SSH_PORT": self._validate_port,
            "SSH_IDLE_TIMEOUT": self._validate_idle_timeout,
            "SSH_HOST_KEYS": self._validate_host_keys,
            "SSH_ADMIN_GROUP": self._validate_admin_group,
            "SSH_AUTHORIZED_KEYS": self._validate_authorized_keys,
        }

    def validate(self, config: AdminSshConfig) -> ValidationResult:
        """
        Valide une config contre TOUTES les règles.
        Retourne TOUTES les erreurs (pas fail-fast).
        """
        errors = []
        warnings = []

        for rule_id in self._validators:
            error = self.validate_rule(rule_id, config)
            if error:
                if error.severity == ValidationSeverity.BLOCKING:
                    errors.append(error)
                elif error.severity == ValidationSeverity.WARNING:
                    warnings.append(error)

        return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings, checked_at=datetime.now())

    def validate_rule(self, rule_id: str, config: AdminSshConfig) -> Optional[ValidationError]:
        """Valide UNE règle spécifique."""
        if rule_id not in self._validators:
            return ValidationError(
                rule_id=rule_id,
                message=f"Règle inconnue: {rule_id}",
                location="config",
                severity=ValidationSeverity.BLOCKING,
            )

        return self._validators[rule_id](config)

    def _validate_port(self, config: AdminSshConfig) -> Optional[ValidationError]:
        """Port TCP dans 1-65535."""
        if not 0 < config.port <= 65535:
            return ValidationError(
                rule_id="SSH_PORT",
                message=f"Port {config.port} hors de la plage 1-65535",
                location="port",
                value=str(config.port),
            )
        return None

    def _validate_idle_timeout(self, config: AdminSshConfig) -> Optional[ValidationError]:
        """Timeout d'inactivité strictement positif."""
        if config.idle_timeout <= 0:
            return ValidationError(
                rule_id="SSH_IDLE_TIMEOUT",
                message="idle_timeout doit être strictement positif",
                location="idle_timeout",
                value=str(config.idle_timeout),
            )
        return None

    def _validate_host_keys(self, config: AdminSshConfig) -> Optional[ValidationError]:
        """Au moins une clé d'hôte, chaque fichier présent."""
        if not config.host_keys:
            return ValidationError(
                rule_id="SSH_HOST_KEYS",
                message="Au moins une clé d'hôte est requise",
                location="host_keys",
            )

        missing = [path for path in config.host_keys if not Path(path).is_file()]
        if missing:
            return ValidationError(
                rule_id="SSH_HOST_KEYS",
                message=f"Clé(s) d'hôte introuvable(s): {', '.join(missing)}",
                location="host_keys",
                value=describe_value(missing),
            )
        return None

    def _validate_admin_group(self, config: AdminSshConfig) -> Optional[ValidationError]:
        """Identifiant de groupe admin positif ou nul."""
        if config.admin_group_id < 0:
            return ValidationError(
                rule_id="SSH_ADMIN_GROUP",
                message="admin_group_id doit être positif ou nul",
                location="admin_group_id",
                value=str(config.admin_group_id),
            )
        return None

    def _validate_authorized_keys(self, config: AdminSshConfig) -> Optional[ValidationError]:
        """
        Liste des clés autorisées.

        Chemin vide → bloquant. Fichier absent → avertissement seulement:
        aucune clé ne sera acceptée tant qu'il n'existe pas.
        """
        if not config.authorized_keys.strip():
            return ValidationError(
                rule_id="SSH_AUTHORIZED_KEYS",
                message="authorized_keys ne peut pas être vide",
                location="authorized_keys",
            )

        if not Path(config.authorized_keys).exists():
            return ValidationError(
                rule_id="SSH_AUTHORIZED_KEYS",
                message=f"Fichier authorized_keys absent: {config.authorized_keys}",
                location="authorized_keys",
                value=config.authorized_keys,
                severity=ValidationSeverity.WARNING,
            )
        return None
