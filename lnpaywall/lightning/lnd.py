"""
lnd REST client

Creates invoices and checks their settlement status on an lnd node through its
REST gateway. Authentication uses a macaroon sent as a hex encoded header and
TLS is verified against the node's own certificate.
"""

import logging
import os
from typing import Any, Dict, Optional

import requests

from lnpaywall.config import LNDOptions
from lnpaywall.errors import (
    ChargeNotFound,
    ConfigError,
    InvalidAmount,
    VerificationUnavailable,
)
from lnpaywall.lightning.proof import decode_proof, encode_proof, payment_hash

logger = logging.getLogger(__name__)

MACAROON_HEADER = "Grpc-Metadata-macaroon"
INVOICE_NOT_FOUND_MESSAGE = "unable to locate invoice"


def read_macaroon(path: str) -> str:
    """Read a macaroon file and return its content as upper-case hex.

    Args:
        path: Path to the binary macaroon file

    Returns:
        Hex representation expected by the REST gateway

    Raises:
        ConfigError: If the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            return f.read().hex().upper()
    except OSError as e:
        raise ConfigError(f"Failed to read macaroon file {path}: {e}") from e


class LNDClient:
    """Payment verifier backed by an lnd node.

    One instance holds one HTTP session and is meant to be created once and
    shared by every paywall in the process. Call :meth:`close` on shutdown.

    The session is used from several worker threads at once. That relies on
    the urllib3 connection pool being thread-safe and on the session state
    (headers, TLS settings) being fixed after construction; lnd sets no
    cookies, so nothing in the session is mutated per request.
    """

    def __init__(
        self,
        options: Optional[LNDOptions] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            options: Node connection options, empty values fall back to defaults
            session: Optional preconfigured session (mainly for tests)

        Raises:
            ConfigError: If the macaroon or TLS certificate file cannot be read
        """
        self.options = (options or LNDOptions()).with_defaults()
        self.base_url = _base_url(self.options.address)
        self.timeout = self.options.timeout

        macaroon_hex = read_macaroon(self.options.macaroon_file)
        if not os.path.isfile(self.options.cert_file):
            raise ConfigError(f"TLS certificate file {self.options.cert_file} not found")

        self.session = session or requests.Session()
        self.session.headers.update({MACAROON_HEADER: macaroon_hex})
        self.session.verify = self.options.cert_file

    def __enter__(self) -> "LNDClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def issue_charge(self, amount: int, memo: str) -> str:
        """Create an invoice on the node.

        Args:
            amount: Invoice value in satoshis
            memo: Human readable description embedded in the invoice

        Returns:
            The BOLT11 payment request

        Raises:
            InvalidAmount: If amount is not positive
            VerificationUnavailable: If the node cannot be reached or answers badly
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmount(f"Amount must be a positive integer, got {amount!r}")

        logger.info(f"[lnd] Creating invoice for {amount} sat, memo={memo!r}")
        body = self._request("POST", "/v1/invoices", json={"value": amount, "memo": memo})

        payment_request = body.get("payment_request")
        if not payment_request:
            raise VerificationUnavailable("Node response did not contain a payment request")
        return payment_request

    def is_settled(self, proof: str) -> bool:
        """Check whether the invoice paid with ``proof`` is settled.

        Args:
            proof: Base64 encoded preimage

        Returns:
            True if settled, False if the invoice exists but is still open

        Raises:
            ProofMalformed: If the proof does not decode
            ChargeNotFound: If no invoice exists for the derived hash
            VerificationUnavailable: If the node cannot be reached or answers badly
        """
        hash_bytes = payment_hash(decode_proof(proof))
        logger.info(f"[lnd] Checking invoice for hash {encode_proof(hash_bytes)}")

        invoice = self._request("GET", f"/v1/invoice/{hash_bytes.hex()}")

        state = invoice.get("state")
        if state is not None:
            return state == "SETTLED"
        return bool(invoice.get("settled", False))

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise VerificationUnavailable(f"lnd request timed out: {url}") from e
        except requests.exceptions.RequestException as e:
            raise VerificationUnavailable(f"lnd request failed: {e}") from e

        if response.status_code == 200:
            try:
                body = response.json()
            except ValueError as e:
                raise VerificationUnavailable(
                    f"Failed to parse JSON from lnd at {url}: {response.text[:200]}"
                ) from e
            if not isinstance(body, dict):
                raise VerificationUnavailable(
                    f"Unexpected response from lnd at {url}: {response.text[:200]}"
                )
            return body

        message = _error_message(response)
        if response.status_code == 404 or INVOICE_NOT_FOUND_MESSAGE in message.lower():
            raise ChargeNotFound(message or "Invoice not found")
        raise VerificationUnavailable(f"lnd responded with {response.status_code}: {message}")


def _base_url(address: str) -> str:
    if address.startswith("http://") or address.startswith("https://"):
        return address.rstrip("/")
    return f"https://{address}"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
