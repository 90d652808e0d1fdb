"""
Network - Interfaces

Contrats pour la politique de timeout des connexions SSH.

Règles:
    - Timeout d'inactivité strictement positif
    - Timeout de lecture transport = 2 x timeout d'inactivité (même unité)
"""

from abc import ABC, abstractmethod
from enum import Enum


class TimeUnit(Enum):
    """Unités de temps acceptées en configuration."""

    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def seconds(self) -> float:
        """Nombre de secondes dans une unité."""
        factors = {
            TimeUnit.MILLISECONDS: 0.001,
            TimeUnit.SECONDS: 1.0,
            TimeUnit.MINUTES: 60.0,
            TimeUnit.HOURS: 3600.0,
            TimeUnit.DAYS: 86400.0,
        }
        return factors[self]

    def to_seconds(self, value: float) -> float:
        """Convertit une durée exprimée dans cette unité en secondes."""
        return value * self.seconds


class IIdleTimeoutPolicy(ABC):
    """
    Interface politique de timeout d'inactivité.

    L'application effective du timeout reste la responsabilité du transport;
    cette politique fournit et valide les valeurs.
    """

    @abstractmethod
    def idle_timeout_seconds(self) -> float:
        """Timeout d'inactivité en secondes."""
        pass

    @abstractmethod
    def read_timeout_seconds(self) -> float:
        """Timeout de lecture transport en secondes (2 x inactivité)."""
        pass
