"""Shared helpers for turning provider payloads into Decimals."""

from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from signaldesk.domain.market_data.exceptions import ProviderResponseError


def parse_json(response: httpx.Response, provider: str) -> Any:
    """Return the decoded JSON body of a 2xx response.

    Raises:
        ProviderResponseError: On non-2xx status or a body that is not JSON.
    """
    if not response.is_success:
        raise ProviderResponseError(
            "Unexpected HTTP status",
            provider=provider,
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise ProviderResponseError("Response is not JSON", provider=provider) from e


def to_decimal(raw: Any, provider: str) -> Decimal:
    """Convert a quoted value (string or number) to Decimal.

    Floats go through ``str`` so 175.5 becomes Decimal("175.5"), not its
    binary expansion.
    """
    if raw is None or isinstance(raw, bool):
        raise ProviderResponseError("Price missing from payload", provider=provider)
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError) as e:
        raise ProviderResponseError("Price is not a number", provider=provider, raw=str(raw)) from e
    if not value.is_finite():
        raise ProviderResponseError("Price is not finite", provider=provider, raw=str(raw))
    return value
