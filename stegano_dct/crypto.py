from __future__ import annotations

import logging
import os
import zlib

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes

from .config import OperationContext
from .errors import DecompressionFailed, DecryptionFailed, PasswordRequired


logger = logging.getLogger(__name__)

SALT_SIZE = 16
NONCE_SIZE = 12


def _derive_key(password: str, salt: bytes, length: int = 32, iterations: int = 200_000) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt_bytes(password: str, plaintext: bytes) -> bytes:
    """Encrypt bytes using AES-256-GCM with PBKDF2-HMAC-SHA256.

    Output format: salt(16) || nonce(12) || ciphertext+tag
    """
    salt = os.urandom(SALT_SIZE)
    key = _derive_key(password, salt)
    aesgcm = AESGCM(key)
    nonce = os.urandom(NONCE_SIZE)
    ct = aesgcm.encrypt(nonce, plaintext, associated_data=None)
    return salt + nonce + ct


def decrypt_bytes(password: str, blob: bytes) -> bytes:
    """Decrypt bytes produced by encrypt_bytes."""
    if len(blob) < SALT_SIZE + NONCE_SIZE:
        raise DecryptionFailed("Blob too short for salt+nonce")
    salt = blob[:SALT_SIZE]
    nonce = blob[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
    ct = blob[SALT_SIZE + NONCE_SIZE:]
    key = _derive_key(password, salt)
    aesgcm = AESGCM(key)
    try:
        return aesgcm.decrypt(nonce, ct, associated_data=None)
    except InvalidTag as e:
        raise DecryptionFailed("Wrong password or corrupted data") from e


def compress_bytes(data: bytes, level: int = 6) -> bytes:
    return zlib.compress(data, level)


def decompress_bytes(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise DecompressionFailed(f"Embedded data is not valid zlib: {e}") from e


def _password(context: OperationContext) -> str:
    if not context.password:
        raise PasswordRequired()
    return context.password


def transform_out(data: bytes, context: OperationContext) -> bytes:
    """Prepare a payload for embedding: compress, then encrypt, as requested."""
    if context.use_compression:
        size = len(data)
        data = compress_bytes(data, context.compression_level)
        logger.debug(f"Compressed payload {size} -> {len(data)} bytes")
    if context.use_encryption:
        data = encrypt_bytes(_password(context), data)
    return data


def transform_in(data: bytes, context: OperationContext) -> bytes:
    """Undo `transform_out`: decrypt, then decompress."""
    if context.use_encryption:
        data = decrypt_bytes(_password(context), data)
    if context.use_compression:
        data = decompress_bytes(data)
    return data
