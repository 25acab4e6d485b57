"""
Error values produced by the tier request handlers.

These are never raised past a handler. The handler builds one of them when
a simulated outcome or a downstream call fails, and renders it into a JSON
``{"error": ...}`` response while marking its span as ERROR.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional


class TierError(Exception):
    """Base class for request-level failures inside a tier.

    Attributes:
        status_code: HTTP status returned to the caller
        body_message: Value of the ``error`` field in the response body
        span_message: Description recorded on the span status
        log_message: Message logged when the error is handled
        log_level: Level the error is logged at
    """

    status_code = 500
    log_level = logging.ERROR

    def __init__(
        self,
        body_message: str,
        span_message: Optional[str] = None,
        log_message: Optional[str] = None,
    ) -> None:
        super().__init__(span_message or body_message)
        self.body_message = body_message
        self.span_message = span_message or body_message
        self.log_message = log_message or self.span_message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.body_message}


class SimulatedClientError(TierError):
    """Simulated invalid request (400)."""
    status_code = 400
    log_level = logging.WARNING


class SimulatedServerError(TierError):
    """Simulated internal failure (500)."""
    status_code = 500


class DownstreamUnavailable(TierError):
    """The next tier could not be reached or answered with an error (503).

    The span carries the downstream error's own message; the caller only
    sees the tier's generic "unavailable" body.
    """
    status_code = 503
