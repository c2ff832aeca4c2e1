"""
Configuration for the paywall and its backends.

Values come from the process environment, optionally seeded from a ``.env``
file. Explicit arguments always win over the environment.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import load_dotenv

from lnpaywall.errors import ConfigError

# Environment variable keys
ENV_LND_ADDRESS = "LND_ADDRESS"
ENV_LND_CERT_FILE = "LND_CERT_FILE"
ENV_LND_MACAROON_FILE = "LND_MACAROON_FILE"
ENV_LND_TIMEOUT = "LND_TIMEOUT"
ENV_STORAGE_URL = "PAYWALL_STORAGE_URL"
ENV_STORAGE_TIMEOUT = "PAYWALL_STORAGE_TIMEOUT"
ENV_HEADER = "PAYWALL_HEADER"
ENV_AMOUNT = "PAYWALL_AMOUNT"
ENV_MEMO = "PAYWALL_MEMO"
ENV_LOG_LEVEL = "LOG_LEVEL"

DEFAULT_HEADER = "X-Preimage"
DEFAULT_STORAGE_URL = "memory://"


@dataclass(frozen=True)
class LNDOptions:
    """Connection options for an lnd node's REST gateway.

    Attributes:
        address: Host and port of the REST listener
        cert_file: Path to the node's ``tls.cert``
        macaroon_file: Path to a macaroon allowed to create and read invoices
        timeout: Seconds to wait for the node before giving up
    """

    address: str = "localhost:8080"
    cert_file: str = "tls.cert"
    macaroon_file: str = "invoice.macaroon"
    timeout: float = 10.0

    def with_defaults(self) -> "LNDOptions":
        """Return a copy where every empty value is replaced by its default."""
        defaults = LNDOptions()
        return replace(
            self,
            address=self.address or defaults.address,
            cert_file=self.cert_file or defaults.cert_file,
            macaroon_file=self.macaroon_file or defaults.macaroon_file,
            timeout=self.timeout if self.timeout and self.timeout > 0 else defaults.timeout,
        )

    @classmethod
    def from_env(cls) -> "LNDOptions":
        return cls(
            address=os.getenv(ENV_LND_ADDRESS, ""),
            cert_file=os.getenv(ENV_LND_CERT_FILE, ""),
            macaroon_file=os.getenv(ENV_LND_MACAROON_FILE, ""),
            timeout=_parse_float(ENV_LND_TIMEOUT, os.getenv(ENV_LND_TIMEOUT), 0.0),
        ).with_defaults()


@dataclass(frozen=True)
class PaywallSettings:
    """Everything needed to assemble a paywall from the environment."""

    lnd: LNDOptions = field(default_factory=LNDOptions)
    storage_url: str = DEFAULT_STORAGE_URL
    storage_timeout: float = 5.0
    header_name: str = DEFAULT_HEADER
    amount: int = 1
    memo: str = "API call"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "PaywallSettings":
        """Load settings from the environment.

        Args:
            env_file: Optional path to a ``.env`` file. Existing environment
                variables are not overridden by the file.

        Returns:
            Validated settings

        Raises:
            ConfigError: If a value cannot be parsed or is out of range
        """
        load_dotenv(env_file)

        amount = _parse_int(ENV_AMOUNT, os.getenv(ENV_AMOUNT), 1)
        if amount <= 0:
            raise ConfigError(f"{ENV_AMOUNT} must be a positive integer, got {amount}")

        header_name = os.getenv(ENV_HEADER, DEFAULT_HEADER).strip()
        if not header_name:
            raise ConfigError(f"{ENV_HEADER} must not be empty")

        return cls(
            lnd=LNDOptions.from_env(),
            storage_url=os.getenv(ENV_STORAGE_URL, DEFAULT_STORAGE_URL),
            storage_timeout=_parse_float(
                ENV_STORAGE_TIMEOUT, os.getenv(ENV_STORAGE_TIMEOUT), 5.0
            ),
            header_name=header_name,
            amount=amount,
            memo=os.getenv(ENV_MEMO, "API call"),
            log_level=os.getenv(ENV_LOG_LEVEL, "INFO").upper(),
        )


def _parse_int(key: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got '{raw}'") from exc


def _parse_float(key: str, raw: Optional[str], default: float) -> float:
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got '{raw}'") from exc
