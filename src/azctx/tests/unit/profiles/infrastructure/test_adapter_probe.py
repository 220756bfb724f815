"""Unit tests for profiles infrastructure probes."""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import ObservationContext
from profiles.infrastructure.observability import (
    DefaultCredentialServiceProbe,
    DefaultSubscriptionClientProbe,
)


class TestCredentialServiceProbe:
    """Tests for DefaultCredentialServiceProbe."""

    def test_credential_acquired_logs_debug_with_flow(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultCredentialServiceProbe(logger=mock_logger)

        probe.credential_acquired(account_id="alice", tenant_id="t1", flow="silent")

        mock_logger.debug.assert_called_once_with(
            "credential_acquired", account_id="alice", tenant_id="t1", flow="silent"
        )

    def test_failure_logs_warning_with_context(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultCredentialServiceProbe(logger=mock_logger).with_context(
            ObservationContext(operation_id="op-1")
        )

        probe.credential_acquisition_failed(
            account_id="alice", tenant_id="t1", error="invalid_grant"
        )

        mock_logger.warning.assert_called_once_with(
            "credential_acquisition_failed",
            account_id="alice",
            tenant_id="t1",
            error="invalid_grant",
            operation_id="op-1",
        )


class TestSubscriptionClientProbe:
    """Tests for DefaultSubscriptionClientProbe."""

    def test_request_failed_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultSubscriptionClientProbe(logger=mock_logger)

        probe.request_failed(operation="list_tenants", status_code=None)

        mock_logger.warning.assert_called_once_with(
            "management_request_failed", operation="list_tenants", status_code=None
        )

    def test_subscriptions_listed_logs_debug(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultSubscriptionClientProbe(logger=mock_logger)

        probe.subscriptions_listed(tenant_id="t1", count=4)

        mock_logger.debug.assert_called_once_with(
            "subscriptions_listed", tenant_id="t1", count=4
        )
