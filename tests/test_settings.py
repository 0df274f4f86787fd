"""Tests for configuration and application wiring."""

import pytest
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError

from conftest import FakeLedgerGateway, make_transaction, run
from fintrack.config import AppSettings, GatewaySettings, get_settings, validate_all_settings
from fintrack.models.ledger import EntryType
from fintrack.notifications import Notifier
from fintrack.orchestrator import create_app_components
from fintrack.services.gateway import AuthError, PayloadValidationError, ValidationError
from fintrack.services.storage import InMemoryIdentityStore


class TestSettings:
    """Tests for environment-driven settings."""

    def test_gateway_defaults(self, monkeypatch):
        monkeypatch.delenv("FINTRACK_API_BASE_URL", raising=False)
        settings = GatewaySettings()
        assert settings.base_url == "http://127.0.0.1:5000"
        assert settings.timeout_seconds == 10.0

    def test_gateway_from_env(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_API_BASE_URL", "https://ledger.example.com/api/")
        monkeypatch.setenv("FINTRACK_API_TIMEOUT_SECONDS", "2.5")
        settings = GatewaySettings()
        assert settings.base_url == "https://ledger.example.com/api"
        assert settings.timeout_seconds == 2.5

    def test_gateway_rejects_non_http(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_API_BASE_URL", "ftp://ledger")
        with pytest.raises(PydanticValidationError):
            GatewaySettings()

    def test_app_log_level(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"
        monkeypatch.setenv("FINTRACK_LOG_LEVEL", "loud")
        with pytest.raises(PydanticValidationError):
            AppSettings()

    def test_debug_mode_forces_debug_logging(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_LOG_LEVEL", "warning")
        monkeypatch.setenv("FINTRACK_DEBUG_MODE", "false")
        assert AppSettings().effective_log_level == "WARNING"
        monkeypatch.setenv("FINTRACK_DEBUG_MODE", "true")
        assert AppSettings().effective_log_level == "DEBUG"

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_API_BASE_URL", "not a url")
        get_settings.cache_clear()
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()
        assert results["gateway"] is False
        assert "gateway_error" in results


class TestNotifier:
    """Tests for how failures become messages."""

    def test_prefers_server_message(self):
        notifier = Notifier()
        notification = notifier.failure(AuthError("x", server_message="Nope"), "Default")
        assert notification.message == "Nope"

    def test_falls_back_to_default(self):
        notification = Notifier().failure(AuthError("x"), "Default")
        assert notification.message == "Default"

    def test_input_errors_use_their_own_text(self):
        notification = Notifier().failure(ValidationError("Please enter the amount"), "Default")
        assert notification.message == "Please enter the amount"

    def test_payload_errors_use_default(self):
        """Test that a malformed backend reply is not shown verbatim."""
        notification = Notifier().failure(PayloadValidationError("field x missing"), "Default")
        assert notification.message == "Default"

    def test_drain_empties_queue(self):
        notifier = Notifier()
        notifier.info("a", "b")
        assert len(notifier.drain()) == 1
        assert notifier.pending == []


class TestWiring:
    """Tests for create_app_components."""

    def test_components_share_one_session(self, tmp_path):
        gateway = FakeLedgerGateway()
        gateway.add_user(1, "Ana", "ana@example.com", "secret")
        gateway.transactions = [
            make_transaction(1, "100", EntryType.INCOME),
            make_transaction(2, "40", EntryType.EXPENSE),
        ]
        components = create_app_components(
            gateway=gateway,
            identity_store=InMemoryIdentityStore(user_id=1),
            app_settings=AppSettings(identity_file=tmp_path / "session.json"),
        )

        run(components.session.start())
        assert components.session.is_authenticated
        assert run(components.coordinator.refresh_all()) is True

        summary = components.views.dashboard()
        assert summary.balance == Decimal("60")
        assert len(summary.recent) == 2
