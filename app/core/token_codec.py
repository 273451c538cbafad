"""Visit token derivation.

A visit token is the first 20 hex characters of the AES-256-CBC encryption
of the visit request id. Key and IV come from the shared secret through the
OpenSSL ``EVP_BytesToKey`` scheme (MD5, one round, no salt), so tokens match
the ones issued by the legacy Node service for the same secret.

There is no per-call randomness: the same secret and id always give the same
token. Truncating to 20 characters means two ids can collide. That is
accepted for a short-lived visit pass; the token is obfuscation, not a
cryptographic commitment.
"""

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from app.core.exceptions import TokenConfigurationError

TOKEN_LENGTH = 20

_KEY_SIZE = 32
_IV_SIZE = 16


def _md5(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.MD5())
    digest.update(data)
    return digest.finalize()


def derive_key_and_iv(secret: bytes) -> tuple[bytes, bytes]:
    """Derive an AES-256 key and CBC IV from a passphrase (EVP_BytesToKey/MD5)."""
    material = b""
    block = b""
    while len(material) < _KEY_SIZE + _IV_SIZE:
        block = _md5(block + secret)
        material += block
    return material[:_KEY_SIZE], material[_KEY_SIZE : _KEY_SIZE + _IV_SIZE]


class TokenCodec:
    """Derives fixed-length visit tokens from visit request ids."""

    def __init__(self, secret: str | None):
        """Initialize with the process-wide secret (may be None if unconfigured)."""
        self._secret = secret

    def _cipher(self) -> Cipher:
        if not self._secret:
            raise TokenConfigurationError("SECRET_KEY is not configured; cannot derive visit tokens")
        key, iv = derive_key_and_iv(self._secret.encode("utf-8"))
        return Cipher(algorithms.AES(key), modes.CBC(iv))

    def encrypt(self, value: str) -> str:
        """
        Encrypt a value and return the full ciphertext as lowercase hex.

        Raises:
            TokenConfigurationError: If the secret is missing or empty
        """
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(value.encode("utf-8")) + padder.finalize()

        encryptor = self._cipher().encryptor()
        return (encryptor.update(padded) + encryptor.finalize()).hex()

    def derive(self, visit_request_id: str) -> str:
        """
        Derive the visit token for a visit request id.

        Returns:
            20-character lowercase hex string

        Raises:
            TokenConfigurationError: If the secret is missing or empty
        """
        return self.encrypt(visit_request_id)[:TOKEN_LENGTH]
