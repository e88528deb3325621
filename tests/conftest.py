"""Shared fixtures for Bitstring Inspector tests."""

import base64
import gzip
import json
import zlib

import pytest

REVOKED_INDICES = [0, 7, 42, 1023]


def b64url(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def build_bitstring(set_indices: list[int], length: int = 1024) -> bytes:
    """Create a bitstring with the given indices set (bit 0 = LSB of byte 0)."""
    ba = bytearray(length // 8)
    for index in set_indices:
        ba[index // 8] |= 1 << (index % 8)
    return bytes(ba)


def encode_bitstring(bitstring: bytes, compression: str = "gzip", padded: bool = False) -> str:
    """Compress and base64url encode a bitstring."""
    if compression == "gzip":
        data = gzip.compress(bitstring)
    elif compression == "deflate":
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        data = compressor.compress(bitstring) + compressor.flush()
    else:
        data = bitstring
    encoded = base64.urlsafe_b64encode(data).decode()
    return encoded if padded else encoded.rstrip("=")


def build_credential(encoded_list: str, purpose: str = "revocation") -> dict:
    """Create an embedded-proof status list credential."""
    return {
        "@context": ["https://www.w3.org/ns/credentials/v2"],
        "id": "https://example.com/status/1",
        "type": ["VerifiableCredential", "BitstringStatusListCredential"],
        "issuer": "did:web:example.com",
        "validFrom": "2025-01-01T00:00:00Z",
        "credentialSubject": {
            "id": "https://example.com/status/1#list",
            "type": "BitstringStatusList",
            "statusPurpose": purpose,
            "encodedList": encoded_list,
        },
        "proof": {
            "type": "DataIntegrityProof",
            "cryptosuite": "ecdsa-rdfc-2019",
            "proofValue": "z58DAdFfa9SkqZMVPxAQp",
        },
    }


def build_jwt(claims: dict) -> str:
    """Create an unsigned-looking compact JWT around the given claims."""
    header = b64url(json.dumps({"alg": "ES256", "typ": "vc-ld+jwt"}).encode())
    payload = b64url(json.dumps(claims).encode())
    return f"{header}.{payload}.{b64url(b'signature')}"


def build_enveloped(claims: dict, prefix: str = "data:application/vc-ld+jwt,") -> dict:
    """Wrap credential claims in an EnvelopedVerifiableCredential."""
    return {
        "@context": ["https://www.w3.org/ns/credentials/v2"],
        "id": prefix + build_jwt(claims),
        "type": "EnvelopedVerifiableCredential",
    }


@pytest.fixture
def revoked_indices():
    return list(REVOKED_INDICES)


@pytest.fixture
def bitstring():
    """1024-bit list with REVOKED_INDICES set."""
    return build_bitstring(REVOKED_INDICES)


@pytest.fixture
def status_list_credential(bitstring):
    """Embedded-proof credential holding ``bitstring``."""
    return build_credential(encode_bitstring(bitstring))


@pytest.fixture
def enveloped_credential(status_list_credential):
    """The same credential delivered as an enveloped JWT."""
    claims = {k: v for k, v in status_list_credential.items() if k != "proof"}
    return build_enveloped(claims)


@pytest.fixture
def helpers():
    """Builders for tests that need custom credentials."""

    class Helpers:
        b64url = staticmethod(b64url)
        build_bitstring = staticmethod(build_bitstring)
        encode_bitstring = staticmethod(encode_bitstring)
        build_credential = staticmethod(build_credential)
        build_jwt = staticmethod(build_jwt)
        build_enveloped = staticmethod(build_enveloped)

    return Helpers
