r"""Utility functions used by the request pipeline."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "calculate_sleep_time",
    "get_request_id",
    "request_id_context",
    "validate_port",
    "validate_retry_params",
    "validate_timeout",
]

from coreclient.utils.sleep import calculate_sleep_time
from coreclient.utils.structured_logging import (
    StructuredFormatter,
    get_request_id,
    request_id_context,
)
from coreclient.utils.validation import validate_port, validate_retry_params, validate_timeout
