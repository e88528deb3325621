"""Tests for envelope detection, JWT unwrapping and credential validation."""

import pytest

from bitstring_inspector import CredentialType, ErrorCode
from bitstring_inspector.envelope import (
    DATA_URL_PREFIXES,
    classify_document,
    decode_jwt_payload,
    unwrap_credential,
)
from bitstring_inspector.errors import DetailedError
from bitstring_inspector.models import (
    EmbeddedCredential,
    EnvelopedCredential,
    StatusListCredential,
)
from bitstring_inspector.validation import validate_credential


class TestClassifyDocument:
    """Tests for credential shape detection."""

    def test_embedded(self, status_list_credential):
        """Test a typed credential is classified as embedded."""
        shape = classify_document(status_list_credential)

        assert isinstance(shape, EmbeddedCredential)
        assert shape.document is status_list_credential

    def test_enveloped(self, enveloped_credential):
        """Test an EnvelopedVerifiableCredential is detected."""
        shape = classify_document(enveloped_credential)

        assert isinstance(shape, EnvelopedCredential)
        assert shape.id == enveloped_credential["id"]

    def test_string_type_is_embedded(self):
        """Test a single string type is accepted."""
        shape = classify_document({"type": "VerifiableCredential"})

        assert isinstance(shape, EmbeddedCredential)

    @pytest.mark.parametrize("document", [{}, {"type": ""}, {"type": []}, {"id": "x"}])
    def test_missing_type(self, document):
        """Test documents without a type."""
        result = classify_document(document)

        assert isinstance(result, DetailedError)
        assert result.code == ErrorCode.MISSING_CREDENTIAL_TYPE

    @pytest.mark.parametrize("type_value", [42, {"name": "VerifiableCredential"}, True])
    def test_unsupported_type(self, type_value):
        """Test type values that are neither strings nor lists."""
        result = classify_document({"type": type_value})

        assert isinstance(result, DetailedError)
        assert result.code == ErrorCode.UNSUPPORTED_CREDENTIAL_TYPE

    @pytest.mark.parametrize("document", [[], "credential", 3, None])
    def test_not_an_object(self, document):
        """Test non-object documents."""
        result = classify_document(document)

        assert isinstance(result, DetailedError)
        assert result.code == ErrorCode.INVALID_CREDENTIAL_FORMAT


class TestUnwrapCredential:
    """Tests for JWT envelope unwrapping."""

    def test_embedded_passes_through(self, status_list_credential):
        """Test embedded credentials are not unwrapped."""
        unwrapped = unwrap_credential(status_list_credential)

        assert unwrapped.credential_type == CredentialType.EMBEDDED
        assert unwrapped.claims is status_list_credential
        assert unwrapped.original is None

    @pytest.mark.parametrize("prefix", DATA_URL_PREFIXES)
    def test_recognized_prefixes(self, helpers, status_list_credential, prefix):
        """Test every recognized data URL prefix unwraps."""
        enveloped = helpers.build_enveloped(status_list_credential, prefix=prefix)

        unwrapped = unwrap_credential(enveloped)

        assert unwrapped.credential_type == CredentialType.ENVELOPED
        assert unwrapped.claims == status_list_credential
        assert unwrapped.original is enveloped

    def test_unknown_prefix(self, helpers, status_list_credential):
        """Test an unrecognized data URL prefix."""
        enveloped = helpers.build_enveloped(
            status_list_credential, prefix="data:application/json,"
        )

        result = unwrap_credential(enveloped)

        assert result.code == ErrorCode.JWT_PARSE_ERROR
        assert result.message == "Invalid JWT format"

    def test_missing_id(self):
        """Test an envelope without id."""
        result = unwrap_credential({"type": "EnvelopedVerifiableCredential"})

        assert result.code == ErrorCode.JWT_PARSE_ERROR
        assert result.message == "Missing JWT token"

    def test_empty_token(self):
        """Test a prefix with nothing after it."""
        result = unwrap_credential(
            {"type": "EnvelopedVerifiableCredential", "id": "data:application/vc+jwt,"}
        )

        assert result.code == ErrorCode.JWT_PARSE_ERROR
        assert result.message == "Empty JWT token"

    @pytest.mark.parametrize("token", ["a.b", "a.b.c.d", "abc"])
    def test_wrong_segment_count(self, token):
        """Test tokens that are not three segments."""
        result = unwrap_credential(
            {"type": "EnvelopedVerifiableCredential", "id": "data:application/vc+jwt," + token}
        )

        assert result.code == ErrorCode.JWT_PARSE_ERROR
        assert result.message == "Invalid JWT structure"

    def test_no_signature_verification(self, helpers, status_list_credential):
        """Test the signature segment is never checked."""
        token = helpers.build_jwt(status_list_credential).rsplit(".", 1)[0] + ".not-a-signature"

        claims = decode_jwt_payload(token)

        assert claims == status_list_credential


class TestDecodeJwtPayload:
    """Tests for JWT payload decoding."""

    def test_empty_payload(self):
        """Test an empty payload segment."""
        result = decode_jwt_payload("header..signature")

        assert result.code == ErrorCode.JWT_PARSE_ERROR
        assert result.message == "Empty JWT payload"

    def test_invalid_base64(self):
        """Test a payload that is not base64."""
        result = decode_jwt_payload("header.!!!!.signature")

        assert result.code == ErrorCode.BASE64_DECODE_ERROR

    def test_invalid_utf8(self, helpers):
        """Test a payload that is not UTF-8 text."""
        payload = helpers.b64url(b"\xff\xfe")

        result = decode_jwt_payload(f"header.{payload}.signature")

        assert result.code == ErrorCode.BASE64_DECODE_ERROR

    def test_invalid_json(self, helpers):
        """Test a payload that is not JSON."""
        result = decode_jwt_payload(f"header.{helpers.b64url(b'not json')}.signature")

        assert result.code == ErrorCode.INVALID_JSON

    @pytest.mark.parametrize("payload", [b'{"iss": "did:web:example.com"}', b"[1, 2]", b'"text"'])
    def test_missing_credential_subject(self, helpers, payload):
        """Test payloads that are not credentials."""
        result = decode_jwt_payload(f"header.{helpers.b64url(payload)}.signature")

        assert result.code == ErrorCode.INVALID_CREDENTIAL_FORMAT


class TestValidateCredential:
    """Tests for credential validation."""

    def test_valid(self, status_list_credential):
        """Test a well-formed credential produces typed fields."""
        credential = validate_credential(status_list_credential)

        assert isinstance(credential, StatusListCredential)
        assert credential.issuer_id == "did:web:example.com"
        assert credential.valid_from == "2025-01-01T00:00:00Z"
        assert credential.credential_subject.status_purpose == "revocation"
        assert credential.credential_subject.id == "https://example.com/status/1#list"
        assert credential.context == ["https://www.w3.org/ns/credentials/v2"]
        assert credential.claims is status_list_credential

    def test_issuer_object(self, status_list_credential):
        """Test issuer given as an object."""
        status_list_credential["issuer"] = {"id": "did:web:issuer.example", "name": "Issuer"}

        credential = validate_credential(status_list_credential)

        assert credential.issuer_id == "did:web:issuer.example"

    def test_missing_subject(self, status_list_credential):
        """Test a credential without credentialSubject."""
        del status_list_credential["credentialSubject"]

        result = validate_credential(status_list_credential)

        assert result.code == ErrorCode.MISSING_BITSTRING_LIST

    def test_wrong_subject_type(self, status_list_credential):
        """Test the unexpected subject type is named in the message."""
        status_list_credential["credentialSubject"]["type"] = "SomethingElse"

        result = validate_credential(status_list_credential)

        assert result.code == ErrorCode.INVALID_CREDENTIAL_FORMAT
        assert "SomethingElse" in result.message
        assert "SomethingElse" in result.details

    def test_subject_not_an_object(self, status_list_credential):
        """Test a credentialSubject that is a string."""
        status_list_credential["credentialSubject"] = "did:example:123"

        result = validate_credential(status_list_credential)

        assert result.code == ErrorCode.INVALID_CREDENTIAL_FORMAT

    @pytest.mark.parametrize("encoded_list", [None, "", 42])
    def test_bad_encoded_list(self, status_list_credential, encoded_list):
        """Test a missing, empty or non-string encodedList."""
        subject = status_list_credential["credentialSubject"]
        if encoded_list is None:
            del subject["encodedList"]
        else:
            subject["encodedList"] = encoded_list

        result = validate_credential(status_list_credential)

        assert result.code == ErrorCode.INVALID_CREDENTIAL_FORMAT
        assert result.message == "Missing encoded list"
