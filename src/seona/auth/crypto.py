"""RSA signature verification and challenge encryption.

Uses PKCS#1 v1.5 padding for both operations, with SHA-512 for
signatures — what OpenSSL's sign/verify and public_encrypt default to,
which is what the Seona platform produces and expects.

The payload in both directions is the UTF-8 encoding of the stored
identifier string (the hex text, not the 16 decoded bytes).
"""

import base64
import binascii

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from seona.errors import EncryptionFailed


def _load_rsa_public_key(public_key_pem: bytes | str) -> rsa.RSAPublicKey:
    if isinstance(public_key_pem, str):
        public_key_pem = public_key_pem.encode()
    key = serialization.load_pem_public_key(public_key_pem)
    if not isinstance(key, rsa.RSAPublicKey):
        raise TypeError(f"Expected an RSA public key, got {type(key).__name__}")
    return key


class CryptoVerifier:
    """Stateless RSA helpers bound to the identifier payload format."""

    def verify(
        self,
        identifier: str,
        signature_b64: str,
        public_key_pem: bytes | str,
    ) -> bool:
        """Check `signature_b64` is an RSA-SHA512 signature of `identifier`.

        Returns True only on an exact match. Bad base64, a malformed or
        non-RSA key, and a mismatched signature all return False.
        """
        try:
            signature = base64.b64decode(signature_b64, validate=True)
            public_key = _load_rsa_public_key(public_key_pem)
            public_key.verify(
                signature,
                identifier.encode("utf-8"),
                padding.PKCS1v15(),
                hashes.SHA512(),
            )
            return True
        except (
            InvalidSignature,
            UnsupportedAlgorithm,
            binascii.Error,
            ValueError,
            TypeError,
        ):
            return False

    def encrypt_for_challenge(
        self,
        identifier: str,
        public_key_pem: bytes | str,
    ) -> bytes:
        """RSA-encrypt `identifier` under `public_key_pem`.

        Raises EncryptionFailed if the key can't be loaded or the payload
        doesn't fit the key size.
        """
        try:
            public_key = _load_rsa_public_key(public_key_pem)
            return public_key.encrypt(identifier.encode("utf-8"), padding.PKCS1v15())
        except (UnsupportedAlgorithm, ValueError, TypeError) as e:
            raise EncryptionFailed() from e
