"""
Fetch-and-decode pipeline for Bitstring Status List credentials.

fetch -> unwrap envelope -> validate -> base64url decode -> decompress

Every stage returns either its output or a DetailedError; the first error
ends the pipeline.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from bitstring_inspector.codec import decode_status_list
from bitstring_inspector.envelope import unwrap_credential
from bitstring_inspector.errors import (
    CrossOriginError,
    DetailedError,
    ErrorCode,
    classify_http_status,
    create_error,
)
from bitstring_inspector.models import DecodedStatusList, StatusListResult
from bitstring_inspector.validation import validate_credential

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/vc+ld+json, application/vc+jwt, application/json"


def decode_document(document: Any) -> StatusListResult:
    """Run the decode pipeline on an already parsed document.

    Args:
        document: Parsed JSON status list credential (embedded or enveloped).

    Returns:
        StatusListResult with the DecodedStatusList or the error.
    """
    try:
        unwrapped = unwrap_credential(document)
        if isinstance(unwrapped, DetailedError):
            return StatusListResult.failed(unwrapped)

        credential = validate_credential(unwrapped.claims)
        if isinstance(credential, DetailedError):
            return StatusListResult.failed(credential)

        decoded = decode_status_list(credential.credential_subject.encoded_list)
        if decoded.error is not None:
            return StatusListResult.failed(decoded.error)

        return StatusListResult.succeeded(
            DecodedStatusList(
                credential=credential,
                decoded_bits=decoded.data,
                credential_type=unwrapped.credential_type,
                original_enveloped_credential=unwrapped.original,
            )
        )

    except Exception as e:
        logger.exception("Unexpected error decoding status list credential")
        return StatusListResult.failed(
            create_error(
                ErrorCode.UNKNOWN_ERROR,
                "An unexpected error occurred",
                str(e) or type(e).__name__,
                suggestion="Please try again or report this issue if it persists.",
            )
        )


class StatusListFetcher:
    """Fetches and decodes Bitstring Status List credentials over HTTP."""

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
            client: Client to use instead of creating one per request.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.client = client

    def fetch_status_list(self, url: str) -> StatusListResult:
        """Fetch a status list credential and decode its bitstring.

        Args:
            url: URL of the status list credential.

        Returns:
            StatusListResult with the DecodedStatusList or the error.
        """
        logger.info("Fetching status list from %s", url)
        try:
            document = self._fetch_document(url)
            if isinstance(document, DetailedError):
                logger.info("Fetch failed: %s", document)
                return StatusListResult.failed(document)

            result = decode_document(document)
            if result.error is not None:
                logger.info("Decode failed: %s", result.error)
            return result

        except Exception as e:
            logger.exception("Unexpected error fetching status list from %s", url)
            return StatusListResult.failed(
                create_error(
                    ErrorCode.UNKNOWN_ERROR,
                    "An unexpected error occurred",
                    str(e) or type(e).__name__,
                    suggestion="Please try again or report this issue if it persists.",
                )
            )

    def _fetch_document(self, url: str) -> Any:
        """GET the URL and parse the JSON body.

        Returns:
            The parsed document, or a DetailedError.
        """
        try:
            if self.client is not None:
                response = self._get(self.client, url)
            else:
                with httpx.Client(timeout=self.timeout, verify=self.verify_ssl) as client:
                    response = self._get(client, url)

        except httpx.TimeoutException as e:
            return create_error(
                ErrorCode.TIMEOUT,
                "Request timed out",
                f"No response from the server within {self.timeout} seconds. {e}",
                suggestion="The server may be slow or unreachable. Try again or increase the timeout.",
            )
        except CrossOriginError as e:
            return create_error(
                ErrorCode.CORS_ERROR,
                "Cross-origin request blocked",
                f"The server doesn't allow requests from this domain. {e}",
                suggestion="Contact the server administrator to enable CORS, or use a proxy server.",
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            return create_error(
                ErrorCode.NETWORK_ERROR,
                "Unable to connect to the server",
                str(e) or "Network request failed",
                suggestion="Check your internet connection and verify the URL is correct.",
            )

        if not response.is_success:
            return classify_http_status(response.status_code, response.reason_phrase)

        try:
            return response.json()
        except (ValueError, RecursionError):
            return create_error(
                ErrorCode.INVALID_JSON,
                "Invalid JSON response",
                "The server response is not valid JSON.",
                suggestion="Verify the URL points to a valid credential endpoint.",
            )

    def _get(self, client: httpx.Client, url: str) -> httpx.Response:
        return client.get(
            url,
            headers={"Accept": ACCEPT_HEADER},
            follow_redirects=True,
        )


def fetch_status_list(
    url: str,
    timeout: float = 30.0,
    verify_ssl: bool = True,
) -> StatusListResult:
    """Convenience function to fetch and decode a status list.

    Args:
        url: URL of the status list credential.
        timeout: HTTP request timeout in seconds.
        verify_ssl: Whether to verify SSL certificates.

    Returns:
        StatusListResult with the DecodedStatusList or the error.
    """
    fetcher = StatusListFetcher(timeout=timeout, verify_ssl=verify_ssl)
    return fetcher.fetch_status_list(url)


def format_credential_info(decoded: DecodedStatusList) -> dict[str, Any]:
    """Summarize a decoded status list for display.

    Args:
        decoded: The decoded status list.

    Returns:
        Dictionary of credential type, id, purpose, size, validity and issuer.
    """
    credential = decoded.credential
    subject = decoded.bitstring_list
    return {
        "credential_type": decoded.credential_type.value,
        "id": subject.id or credential.id,
        "status_purpose": subject.status_purpose,
        "total_bits": decoded.total_bits,
        "valid_from": subject.valid_from or credential.valid_from,
        "valid_until": subject.valid_until or credential.valid_until,
        "issuer": credential.issuer,
    }
