"""
Data model for Bitstring Status List credentials.

https://www.w3.org/TR/vc-bitstring-status-list/
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bitstring_inspector.bits import BitStatus, get_bit_range, get_bit_status
from bitstring_inspector.errors import DetailedError

ENVELOPED_CREDENTIAL_TYPE = "EnvelopedVerifiableCredential"
BITSTRING_STATUS_LIST_TYPE = "BitstringStatusList"


class CredentialType(Enum):
    """How the status list credential was delivered."""

    EMBEDDED = "embedded"
    ENVELOPED = "enveloped"


@dataclass(frozen=True)
class EnvelopedCredential:
    """An EnvelopedVerifiableCredential wrapping a JWT in its ``id``."""

    id: str
    document: dict[str, Any] = field(repr=False)


@dataclass(frozen=True)
class EmbeddedCredential:
    """A credential carrying its proof inline."""

    type: str | list[Any]
    document: dict[str, Any] = field(repr=False)


@dataclass(frozen=True)
class BitstringStatusList:
    """The credentialSubject of a status list credential."""

    status_purpose: str
    encoded_list: str
    id: str | None = None
    type: str = BITSTRING_STATUS_LIST_TYPE
    valid_from: str | None = None
    valid_until: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BitstringStatusList:
        """Create BitstringStatusList from a credentialSubject dictionary."""
        return cls(
            status_purpose=data.get("statusPurpose", ""),
            encoded_list=data.get("encodedList", ""),
            id=data.get("id"),
            type=data.get("type", BITSTRING_STATUS_LIST_TYPE),
            valid_from=data.get("validFrom"),
            valid_until=data.get("validUntil"),
        )


@dataclass(frozen=True)
class StatusListCredential:
    """A (possibly unwrapped) Bitstring Status List credential."""

    credential_subject: BitstringStatusList
    issuer: str | dict[str, Any] | None = None
    id: str | None = None
    type: str | list[Any] | None = None
    valid_from: str | None = None
    valid_until: str | None = None
    proof: Any = None
    context: str | list[Any] | None = None
    claims: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusListCredential:
        """Create StatusListCredential from credential claims."""
        return cls(
            credential_subject=BitstringStatusList.from_dict(data["credentialSubject"]),
            issuer=data.get("issuer"),
            id=data.get("id"),
            type=data.get("type"),
            valid_from=data.get("validFrom"),
            valid_until=data.get("validUntil"),
            proof=data.get("proof"),
            context=data.get("@context"),
            claims=data,
        )

    @property
    def issuer_id(self) -> str | None:
        """Issuer ID, whether issuer is a string or an object."""
        if isinstance(self.issuer, str):
            return self.issuer
        if isinstance(self.issuer, dict):
            return self.issuer.get("id")
        return None


@dataclass(frozen=True)
class DecodedStatusList:
    """A fully decoded status list, ready for bit queries."""

    credential: StatusListCredential
    decoded_bits: bytes = field(repr=False)
    credential_type: CredentialType
    original_enveloped_credential: dict[str, Any] | None = field(default=None, repr=False)

    @property
    def bitstring_list(self) -> BitstringStatusList:
        return self.credential.credential_subject

    @property
    def status_purpose(self) -> str:
        return self.credential.credential_subject.status_purpose

    @property
    def total_bits(self) -> int:
        return len(self.decoded_bits) * 8

    def get_bit_status(self, index: int) -> bool | DetailedError:
        """Get the bit at ``index``."""
        return get_bit_status(self.decoded_bits, index)

    def get_bit_range(self, start: int, end: int) -> list[BitStatus] | DetailedError:
        """Get bits in ``[start, end]`` tagged with this list's status purpose."""
        return get_bit_range(self.decoded_bits, start, end, self.status_purpose)


@dataclass(frozen=True)
class StatusListResult:
    """Outcome of fetching and decoding a status list."""

    success: bool
    data: DecodedStatusList | None = None
    error: DetailedError | None = None

    @classmethod
    def succeeded(cls, data: DecodedStatusList) -> StatusListResult:
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: DetailedError) -> StatusListResult:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding an encodedList value."""

    data: bytes | None = None
    error: DetailedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
