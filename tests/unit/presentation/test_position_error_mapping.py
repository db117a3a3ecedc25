"""Unit tests for mapping domain errors onto HTTP responses."""

import importlib
import warnings

import pytest

from signaldesk.domain.shared import BusinessRuleViolation, DomainException
from signaldesk.domain.trading.exceptions import (
    PositionAlreadyClosedError,
    PositionNotFoundError,
    PriceUnavailableError,
)
from signaldesk.presentation.api.v1.routes import positions


class TestDomainErrorMapping:
    @pytest.mark.parametrize(
        "exc,status_code",
        [
            (PositionNotFoundError("Position not found", position_id="T-404"), 404),
            (PositionAlreadyClosedError("Position already closed", position_id="T-1"), 409),
            (PriceUnavailableError("No price", ticker="AAPL"), 503),
            (BusinessRuleViolation("Exit price must be positive"), 422),
            (DomainException("Something else"), 400),
        ],
    )
    def test_status_codes(self, exc, status_code):
        http_error = positions._to_http_error(exc)

        assert http_error.status_code == status_code
        assert http_error.detail == {"error": type(exc).__name__, "message": exc.message}

    def test_module_loads_without_deprecated_status_names(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            importlib.reload(positions)

        deprecated = [w for w in caught if "HTTP_422" in str(w.message)]
        assert deprecated == []
