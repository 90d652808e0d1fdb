"""
SSH Admin - Key Codec Implementation
Décodage des clés publiques SSH et calcul d'empreintes.
"""

import base64
import binascii
import hashlib

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from .interfaces import IKeyCodec, PublicKey


class KeyDecodeError(Exception):
    """Clé publique illisible ou non supportée."""

    pass


class KeyCodec(IKeyCodec):
    """Décodage des clés publiques OpenSSH via cryptography."""

    def decode(self, algorithm: str, blob: bytes) -> PublicKey:
        """
        Décode une clé et retourne sa forme canonique.

        La clé est chargée puis ré-encodée, ce qui valide son contenu et
        normalise la comparaison.

        Args:
            algorithm: Nom SSH annoncé (ex: "ssh-rsa")
            blob: Encodage wire de la clé

        Returns:
            PublicKey canonique

        Raises:
            KeyDecodeError: Clé invalide, algorithme incohérent ou non supporté
        """
        if not algorithm or not blob:
            raise KeyDecodeError("empty key material")

        encoded = algorithm.encode("ascii", errors="replace") + b" " + base64.b64encode(blob)
        try:
            loaded = serialization.load_ssh_public_key(encoded)
            canonical = loaded.public_bytes(
                serialization.Encoding.OpenSSH,
                serialization.PublicFormat.OpenSSH,
            )
        except (ValueError, UnsupportedAlgorithm, TypeError) as e:
            raise KeyDecodeError(f"cannot decode {algorithm} key: {e}")

        canonical_algorithm, canonical_blob = canonical.split(b" ")[:2]
        return PublicKey(
            algorithm=canonical_algorithm.decode("ascii"),
            blob=base64.b64decode(canonical_blob),
        )

    def decode_line(self, line: str) -> PublicKey:
        """
        Décode une clé au format OpenSSH.

        Args:
            line: "<algorithm> <base64> [comment]"

        Raises:
            KeyDecodeError: Ligne ou clé invalide
        """
        parts = line.split()
        if len(parts) < 2:
            raise KeyDecodeError("expected '<algorithm> <base64-key>'")

        try:
            blob = base64.b64decode(parts[1], validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeyDecodeError(f"invalid base64 key material: {e}")

        return self.decode(parts[0], blob)

    def fingerprint(self, key: PublicKey) -> str:
        """Empreinte SHA-256 au format OpenSSH ("SHA256:...")."""
        digest = hashlib.sha256(key.blob).digest()
        return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")
