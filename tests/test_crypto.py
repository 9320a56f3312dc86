"""Signature verification + challenge encryption tests."""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from seona.auth.crypto import CryptoVerifier
from seona.errors import EncryptionFailed

from signing import public_pem, sign

IDENTIFIER = "3f9a1c0e5b7d42a8916e0c4d2b8a7f10"


@pytest.fixture()
def verifier():
    return CryptoVerifier()


# ═══════════════════════════════════════════════════════════
# verify
# ═══════════════════════════════════════════════════════════


def test_verify_accepts_valid_signature(verifier, private_key):
    signature = sign(private_key, IDENTIFIER)
    assert verifier.verify(IDENTIFIER, signature, public_pem(private_key)) is True


def test_verify_accepts_str_pem(verifier, private_key):
    signature = sign(private_key, IDENTIFIER)
    pem = public_pem(private_key).decode()
    assert verifier.verify(IDENTIFIER, signature, pem) is True


@pytest.mark.parametrize("position", [0, 100, -1])
def test_verify_rejects_flipped_byte(verifier, private_key, position):
    raw = bytearray(base64.b64decode(sign(private_key, IDENTIFIER)))
    raw[position] ^= 0x01
    tampered = base64.b64encode(bytes(raw)).decode()
    assert verifier.verify(IDENTIFIER, tampered, public_pem(private_key)) is False


def test_verify_rejects_mismatched_key(verifier, private_key, other_private_key):
    signature = sign(other_private_key, IDENTIFIER)
    assert verifier.verify(IDENTIFIER, signature, public_pem(private_key)) is False


def test_verify_rejects_other_identifier(verifier, private_key):
    signature = sign(private_key, "0" * 32)
    assert verifier.verify(IDENTIFIER, signature, public_pem(private_key)) is False


def test_verify_rejects_invalid_base64(verifier, private_key):
    assert verifier.verify(IDENTIFIER, "not base64!!", public_pem(private_key)) is False


def test_verify_rejects_empty_signature(verifier, private_key):
    assert verifier.verify(IDENTIFIER, "", public_pem(private_key)) is False


def test_verify_rejects_malformed_key(verifier, private_key):
    signature = sign(private_key, IDENTIFIER)
    assert verifier.verify(IDENTIFIER, signature, b"<html>502 Bad Gateway</html>") is False


def test_verify_rejects_non_rsa_key(verifier, private_key):
    ed_pem = Ed25519PrivateKey.generate().public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    signature = sign(private_key, IDENTIFIER)
    assert verifier.verify(IDENTIFIER, signature, ed_pem) is False


# ═══════════════════════════════════════════════════════════
# encrypt_for_challenge
# ═══════════════════════════════════════════════════════════


def test_challenge_decrypts_to_identifier(verifier, private_key):
    ciphertext = verifier.encrypt_for_challenge(IDENTIFIER, public_pem(private_key))
    assert private_key.decrypt(ciphertext, padding.PKCS1v15()) == IDENTIFIER.encode()


def test_challenge_is_randomized(verifier, private_key):
    pem = public_pem(private_key)
    first = verifier.encrypt_for_challenge(IDENTIFIER, pem)
    second = verifier.encrypt_for_challenge(IDENTIFIER, pem)
    assert first != second


def test_challenge_malformed_key_fails(verifier):
    with pytest.raises(EncryptionFailed):
        verifier.encrypt_for_challenge(IDENTIFIER, b"not a key")


def test_challenge_payload_too_large_fails(verifier, private_key):
    """A 2048-bit key can't PKCS#1-encrypt 300 bytes."""
    with pytest.raises(EncryptionFailed):
        verifier.encrypt_for_challenge("a" * 300, public_pem(private_key))
