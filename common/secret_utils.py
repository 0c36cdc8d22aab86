# common/secret_utils.py
# -*- coding: utf-8 -*-
"""
Generation of random application secrets.
"""

import secrets

DEFAULT_SECRET_BYTE_LENGTH = 32


def generate_secret(byte_length: int = DEFAULT_SECRET_BYTE_LENGTH) -> str:
    """
    Return `byte_length` bytes from the OS CSPRNG, hex-encoded.

    The result is always ``2 * byte_length`` characters long.

    Raises:
        ValueError: If `byte_length` is smaller than 1.
    """
    if byte_length < 1:
        raise ValueError(f"Secret length must be at least 1 byte, got {byte_length}.")
    return secrets.token_hex(byte_length)


class SecretGenerator:
    """Callable that produces a fresh secret of a fixed length on every call."""

    def __init__(self, byte_length: int = DEFAULT_SECRET_BYTE_LENGTH):
        if byte_length < 1:
            raise ValueError(f"Secret length must be at least 1 byte, got {byte_length}.")
        self.byte_length = byte_length

    def __call__(self) -> str:
        return generate_secret(self.byte_length)
