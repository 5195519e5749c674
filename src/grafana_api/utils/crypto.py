"""Cryptographic helpers: API key material and hashing."""

from __future__ import annotations

import hashlib
import secrets

API_KEY_PREFIX = "sk-"
API_KEY_RANDOM_BYTES = 32
API_KEY_LENGTH = len(API_KEY_PREFIX) + API_KEY_RANDOM_BYTES * 2


def sha256(data: bytes) -> bytes:
    """Single SHA-256 hash."""
    return hashlib.sha256(data).digest()


def generate_api_key() -> str:
    """Generate a new plaintext API key.

    32 bytes from the OS CSPRNG, lowercase hex encoded and prefixed with
    ``sk-`` (67 characters in total).
    """
    return API_KEY_PREFIX + secrets.token_hex(API_KEY_RANDOM_BYTES)


def hash_api_key(key: str) -> str:
    """Return the storable SHA-256 hex digest of a plaintext API key."""
    return sha256(key.encode("utf-8")).hex()
