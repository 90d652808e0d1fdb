"""
SSH Admin - Config Loader Implementation
Charge la configuration du service SSH d'administration depuis YAML.
"""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError as PydanticValidationError

from .interfaces import AdminSshConfig, IConfigLoader


class ConfigIntegrityError(Exception):
    """Erreur d'intégrité de configuration."""

    pass


class ConfigLoader(IConfigLoader):
    """Chargement de la configuration depuis un fichier YAML."""

    REQUIRED_FIELDS = ("authorized_keys", "host_keys")

    def load(self, path: str) -> AdminSshConfig:
        """
        Charge la configuration.

        Args:
            path: Chemin du fichier YAML

        Returns:
            Configuration typée

        Raises:
            ConfigIntegrityError: Si fichier inexistant ou structure invalide
        """
        config_file = Path(path)

        if not config_file.exists():
            raise ConfigIntegrityError(f"Configuration non trouvée: {path}")

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigIntegrityError(f"Erreur de parsing YAML: {e}")
        except OSError as e:
            raise ConfigIntegrityError(f"Erreur de lecture fichier: {e}")

        return self.from_dict(raw)

    def from_dict(self, raw: Any) -> AdminSshConfig:
        """
        Construit la configuration depuis un dictionnaire déjà chargé.

        Raises:
            ConfigIntegrityError: Structure invalide
        """
        if not isinstance(raw, dict):
            raise ConfigIntegrityError("Configuration doit être un objet YAML")

        # Section optionnelle "ssh_admin:" pour partager un fichier
        if "ssh_admin" in raw and isinstance(raw["ssh_admin"], dict):
            raw = raw["ssh_admin"]

        self._validate_basic_structure(raw)

        try:
            return AdminSshConfig(**raw)
        except PydanticValidationError as e:
            raise ConfigIntegrityError(f"Configuration invalide: {e}")

    def _validate_basic_structure(self, raw: Dict[str, Any]) -> None:
        """Valide la présence des champs obligatoires."""
        for field in self.REQUIRED_FIELDS:
            if field not in raw:
                raise ConfigIntegrityError(f"Champ obligatoire manquant: {field}")

        if not isinstance(raw["host_keys"], list):
            raise ConfigIntegrityError("host_keys doit être une liste")
