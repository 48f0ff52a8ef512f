"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import pytest
import structlog

from infrastructure.observability import (
    DefaultStartupProbe,
    DefaultSwitchboardProbe,
    ObservationContext,
)
from infrastructure.observability.probes import (
    DefaultConnectionProbe,
)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_default_probe_accepts_custom_logger(self):
        """Default probe should accept a custom logger."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)
        assert probe._logger is mock_logger

    def test_engine_created_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created(database="tenant_acme", pool_size=5)

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            database="tenant_acme",
            pool_size=5,
        )

    def test_connection_failed_logs_error(self):
        """connection_failed should log error with database and error."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)
        error = Exception("Connection refused")

        probe.connection_failed(database="tenant_acme", error=error)

        mock_logger.error.assert_called_once_with(
            "database_connection_failed",
            database="tenant_acme",
            error="Connection refused",
        )

    def test_pool_closed_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.pool_closed(database="salesdesk")

        mock_logger.info.assert_called_once_with(
            "database_pool_closed", database="salesdesk"
        )


class TestSwitchboardProbe:
    def test_activation_rejected_logs_error(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultSwitchboardProbe(logger=mock_logger)

        probe.activation_rejected(
            current="tenant_acme", requested="tenant_globex", reason="transaction_open"
        )

        mock_logger.error.assert_called_once_with(
            "tenant_database_activation_rejected",
            current="tenant_acme",
            requested="tenant_globex",
            reason="transaction_open",
        )

    def test_database_activated_logs_generation(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultSwitchboardProbe(logger=mock_logger)

        probe.database_activated(database="tenant_acme", generation=3)

        mock_logger.debug.assert_called_once_with(
            "tenant_database_activated", database="tenant_acme", generation=3
        )


class TestStartupProbe:
    def test_application_started_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.application_started(
            version="1.0.0", resolution_strategy="path", root_domain="localhost"
        )

        mock_logger.info.assert_called_once_with(
            "application_started",
            version="1.0.0",
            resolution_strategy="path",
            root_domain="localhost",
        )


class TestObservationContext:
    """Tests for ObservationContext."""

    def test_context_creates_with_defaults(self):
        context = ObservationContext()
        assert context.request_id is None
        assert context.tenant_id is None
        assert context.extra == {}

    def test_as_dict_excludes_none_values(self):
        """as_dict should only include non-None values."""
        context = ObservationContext(request_id="req-123")
        result = context.as_dict()
        assert result == {"request_id": "req-123"}

    def test_with_tenant_creates_new_context(self):
        original = ObservationContext(request_id="req-123")
        new_context = original.with_tenant("01JC", "acme", "tenant_acme")

        assert new_context is not original
        assert original.tenant_id is None
        assert new_context.as_dict() == {
            "request_id": "req-123",
            "tenant_id": "01JC",
            "tenant_slug": "acme",
            "tenant_database": "tenant_acme",
        }

    def test_with_extra_creates_new_context(self):
        """with_extra should return new context with additional metadata."""
        original = ObservationContext(request_id="req-123", extra={"a": 1})
        new_context = original.with_extra(b=2)

        assert new_context.extra == {"a": 1, "b": 2}
        assert original.extra == {"a": 1}

    def test_context_is_immutable(self):
        context = ObservationContext(request_id="req-123")
        with pytest.raises(AttributeError):
            context.request_id = "changed"  # type: ignore[misc]


class TestProbesWithContext:
    """Tests for probes carrying observation context."""

    def test_connection_probe_with_context_includes_metadata(self):
        """A tenant database in the context does not clash with the event's database."""
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        context = ObservationContext().with_tenant("01JC", "acme", "tenant_acme")
        probe = DefaultConnectionProbe(logger=mock_logger).with_context(context)

        probe.connection_verified(database="tenant_acme")

        mock_logger.debug.assert_called_once_with(
            "database_connection_verified",
            database="tenant_acme",
            tenant_id="01JC",
            tenant_slug="acme",
            tenant_database="tenant_acme",
        )

    def test_with_context_preserves_logger(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultSwitchboardProbe(logger=mock_logger)

        new_probe = probe.with_context(ObservationContext(request_id="req-123"))

        assert new_probe._logger is mock_logger
