"""Tests for lnpaywall.config."""

import pytest

from lnpaywall.config import LNDOptions, PaywallSettings
from lnpaywall.errors import ConfigError

ENV_KEYS = [
    "LND_ADDRESS",
    "LND_CERT_FILE",
    "LND_MACAROON_FILE",
    "LND_TIMEOUT",
    "PAYWALL_STORAGE_URL",
    "PAYWALL_STORAGE_TIMEOUT",
    "PAYWALL_HEADER",
    "PAYWALL_AMOUNT",
    "PAYWALL_MEMO",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        # setenv first so values loaded from .env files are removed on teardown
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


class TestLNDOptions:

    def test_defaults(self):
        options = LNDOptions()

        assert options.address == "localhost:8080"
        assert options.cert_file == "tls.cert"
        assert options.macaroon_file == "invoice.macaroon"
        assert options.timeout == 10.0

    def test_empty_values_fall_back_to_defaults(self):
        options = LNDOptions(address="", cert_file="", macaroon_file="", timeout=0).with_defaults()

        assert options == LNDOptions()

    def test_explicit_values_are_kept(self):
        options = LNDOptions(address="node:8081", timeout=2.5).with_defaults()

        assert options.address == "node:8081"
        assert options.timeout == 2.5
        assert options.cert_file == "tls.cert"


class TestPaywallSettings:

    def test_defaults(self, clean_env):
        settings = PaywallSettings.from_env(env_file=None)

        assert settings.lnd == LNDOptions()
        assert settings.storage_url == "memory://"
        assert settings.header_name == "X-Preimage"
        assert settings.amount == 1
        assert settings.log_level == "INFO"

    def test_from_environment(self, clean_env):
        clean_env.setenv("LND_ADDRESS", "10.0.0.2:8080")
        clean_env.setenv("LND_TIMEOUT", "4")
        clean_env.setenv("PAYWALL_STORAGE_URL", "sqlite:///var/lib/paywall.db")
        clean_env.setenv("PAYWALL_AMOUNT", "250")
        clean_env.setenv("PAYWALL_MEMO", "weather lookup")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = PaywallSettings.from_env(env_file=None)

        assert settings.lnd.address == "10.0.0.2:8080"
        assert settings.lnd.timeout == 4.0
        assert settings.storage_url == "sqlite:///var/lib/paywall.db"
        assert settings.amount == 250
        assert settings.memo == "weather lookup"
        assert settings.log_level == "DEBUG"

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / "paywall.env"
        env_file.write_text("PAYWALL_AMOUNT=42\nPAYWALL_HEADER=X-Proof\n")

        settings = PaywallSettings.from_env(env_file=str(env_file))

        assert settings.amount == 42
        assert settings.header_name == "X-Proof"

    @pytest.mark.parametrize("amount", ["0", "-3", "ten"])
    def test_invalid_amount(self, clean_env, amount):
        clean_env.setenv("PAYWALL_AMOUNT", amount)

        with pytest.raises(ConfigError):
            PaywallSettings.from_env(env_file=None)

    def test_invalid_timeout(self, clean_env):
        clean_env.setenv("LND_TIMEOUT", "soon")

        with pytest.raises(ConfigError):
            PaywallSettings.from_env(env_file=None)

    def test_blank_header(self, clean_env):
        clean_env.setenv("PAYWALL_HEADER", "  ")

        with pytest.raises(ConfigError):
            PaywallSettings.from_env(env_file=None)
