# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import base64
import binascii
import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from fetchwire.fetcher.errors import EncryptionError

ENVELOPE_VERSION = 1
SALT_SIZE = 16
NONCE_SIZE = 12
KEY_SIZE = 32
TAG_SIZE = 16
KDF_ITERATIONS = 100_000

_HEADER_SIZE = 1 + SALT_SIZE + NONCE_SIZE


@dataclass(frozen=True)
class EncryptionPolicy:
    """Which directions of an endpoint pass through the encryption envelope"""

    request: bool = False
    response: bool = False


PLAIN = EncryptionPolicy()


def _derive_key(password: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def _require_password(password: str | None) -> str:
    if not password:
        raise EncryptionError(
            "The endpoint is encrypted but the connection has no encryption password"
        )
    return password


def encrypt(body: str | bytes, password: str | None) -> str:
    """
    Seal ``body`` into an ASCII envelope.

    The envelope is the urlsafe base64 form of
    ``version | salt | nonce | ciphertext+tag`` where the AES-256-GCM key is
    derived from ``password`` and the per-message salt. Salt and nonce are
    random, so two envelopes of the same body never match.
    """
    password = _require_password(password)
    plaintext = body.encode("utf-8") if isinstance(body, str) else body

    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    sealed = AESGCM(_derive_key(password, salt)).encrypt(nonce, plaintext, None)

    envelope = bytes([ENVELOPE_VERSION]) + salt + nonce + sealed
    return base64.urlsafe_b64encode(envelope).decode("ascii")


def decrypt(envelope: str | bytes, password: str | None) -> str:
    password = _require_password(password)

    if isinstance(envelope, str):
        envelope = envelope.encode("ascii", errors="replace")

    try:
        raw = base64.urlsafe_b64decode(envelope.strip())
    except (binascii.Error, ValueError) as err:
        raise EncryptionError("Malformed encryption envelope") from err

    if len(raw) < _HEADER_SIZE + TAG_SIZE:
        raise EncryptionError("Malformed encryption envelope: too short")
    if raw[0] != ENVELOPE_VERSION:
        raise EncryptionError(f"Unsupported encryption envelope version {raw[0]}")

    salt = raw[1 : 1 + SALT_SIZE]
    nonce = raw[1 + SALT_SIZE : _HEADER_SIZE]

    try:
        plaintext = AESGCM(_derive_key(password, salt)).decrypt(
            nonce, raw[_HEADER_SIZE:], None
        )
    except InvalidTag as err:
        raise EncryptionError(
            "Could not authenticate the encrypted payload (tampered or wrong password)"
        ) from err

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as err:
        raise EncryptionError("Decrypted payload is not valid UTF-8") from err


__all__ = ["EncryptionPolicy", "PLAIN", "encrypt", "decrypt"]
