"""Symmetric encryption of image layer key material."""

from __future__ import annotations

from enum import Enum

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

# Only for the sample key provider.
HARDCODED_KEY = bytes(
    [
        217, 155, 119, 5, 176, 186, 122, 22, 130, 149, 179, 163, 54, 114, 112, 176,
        221, 155, 55, 27, 245, 20, 202, 139, 155, 167, 240, 163, 55, 17, 218, 234,
    ]
)

_KEY_SIZE = 32
_GCM_NONCE_SIZE = 12
_CTR_IV_SIZE = 16


class Algorithm(Enum):
    """Supported wrapping algorithms; A256GCM is the default."""

    A256GCM = "A256GCM"
    A256CTR = "A256CTR"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Algorithm":
        """Look an algorithm up by its exact name."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown algorithm: {name!r}") from None


def encrypt(data: bytes, key: bytes, iv: bytes, algorithm: Algorithm) -> bytes:
    """Encrypt ``data`` with a 256-bit key."""
    if len(key) != _KEY_SIZE:
        raise ValueError(f"key must be {_KEY_SIZE} bytes, got {len(key)}")
    if algorithm is Algorithm.A256GCM:
        if len(iv) != _GCM_NONCE_SIZE:
            raise ValueError(f"nonce must be {_GCM_NONCE_SIZE} bytes, got {len(iv)}")
        return AESGCM(bytes(key)).encrypt(bytes(iv), bytes(data), None)
    if algorithm is Algorithm.A256CTR:
        if len(iv) != _CTR_IV_SIZE:
            raise ValueError(f"iv must be {_CTR_IV_SIZE} bytes, got {len(iv)}")
        encryptor = Cipher(algorithms.AES(bytes(key)), modes.CTR(bytes(iv))).encryptor()
        return encryptor.update(bytes(data)) + encryptor.finalize()
    raise ValueError(f"unsupported algorithm: {algorithm!r}")