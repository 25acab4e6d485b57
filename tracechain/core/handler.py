"""
Request handling shared by every tier.

One :class:`TierHandler` serves one :class:`~tracechain.core.tiers.TierProfile`.
A request moves through these steps:

1. start a span named after the tier operation and log the request;
2. sleep for a random latency without blocking the event loop;
3. draw the simulated outcome and record it on the span;
4. on a failed outcome, answer 400/500 without calling downstream;
5. otherwise call the next tier (tiers A and B) and answer 200, or 503 if
   that call fails;
6. end the span.

The span is acquired with ``start_as_current_span`` so it is ended on every
exit path. Errors are carried as values and rendered to JSON; nothing raised
inside a request escapes the handler.

Neither the latency nor the downstream call has a timeout. A hung downstream
tier hangs the caller; this is left as-is for chaos experiments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse
from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from opentelemetry.trace import Status, StatusCode

from tracechain.config import ServiceConfig
from tracechain.core.errors import DownstreamUnavailable, TierError
from tracechain.core.outcome import RandomSource, draw_outcome, simulate_latency
from tracechain.core.tiers import DownstreamTarget, Payload, TierProfile

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "tracechain"


@dataclass(frozen=True)
class RequestContext:
    """Per-request handle on the tier span and its identifiers.

    Log calls inside the handler pass :meth:`log_extra` so every line
    carries the identifiers of this span rather than whatever is current.
    """
    span: trace.Span
    trace_id: Optional[str]
    span_id: Optional[str]

    @classmethod
    def from_span(cls, span: trace.Span) -> "RequestContext":
        span_context = span.get_span_context()
        if not span_context.is_valid:
            return cls(span=span, trace_id=None, span_id=None)
        return cls(
            span=span,
            trace_id=trace.format_trace_id(span_context.trace_id),
            span_id=trace.format_span_id(span_context.span_id),
        )

    def log_extra(self) -> Dict[str, Any]:
        return {"trace_id": self.trace_id, "span_id": self.span_id}


@dataclass(frozen=True)
class DownstreamResult:
    """Outcome of a call to the next tier: a parsed body or an error."""
    body: Optional[Payload] = None
    error: Optional[DownstreamUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def call_downstream(
    client: httpx.AsyncClient,
    target: DownstreamTarget,
    url: str,
) -> DownstreamResult:
    """GET the next tier and return its parsed JSON body.

    The current trace context is injected into the request headers. Any
    failure of the call (transport errors, bad URLs, non-2xx statuses,
    undecodable bodies) becomes a :class:`DownstreamUnavailable` value.

    Args:
        client: Shared async HTTP client
        target: The tier being called
        url: Absolute URL of the downstream route

    Returns:
        DownstreamResult with either ``body`` or ``error`` set
    """
    headers: Dict[str, str] = {}
    propagate.inject(headers)
    try:
        response = await client.get(url, headers=headers)
        response.raise_for_status()
        body = response.json()
    except Exception as exc:
        return DownstreamResult(error=target.unavailable(exc))
    return DownstreamResult(body=body)


class TierHandler:
    """Serve one tier endpoint.

    Args:
        profile: Static description of the tier
        config: Service configuration (downstream addresses, latency window)
        tracer: Tracer the tier span is started from
        rng: Random source for latency and outcome draws
    """

    def __init__(
        self,
        profile: TierProfile,
        config: ServiceConfig,
        tracer: trace.Tracer,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.profile = profile
        self.config = config
        self._tracer = tracer
        self._rng = rng

    async def __call__(self, request: Request) -> JSONResponse:
        client: httpx.AsyncClient = request.app.state.http_client
        return await self.handle(client, request.headers)

    async def handle(
        self,
        client: httpx.AsyncClient,
        headers: Optional[Mapping[str, str]] = None,
    ) -> JSONResponse:
        """Handle one request and return its response.

        Args:
            client: HTTP client used for the downstream call
            headers: Inbound request headers, used for the parent trace
                context when no server span is active

        Returns:
            The JSON response for the request
        """
        with self._tracer.start_as_current_span(
            self.profile.operation,
            context=_parent_context(headers),
        ) as span:
            ctx = RequestContext.from_span(span)
            return await self._run(ctx, client)

    async def _run(self, ctx: RequestContext, client: httpx.AsyncClient) -> JSONResponse:
        profile = self.profile
        logger.info(profile.start_log, extra=ctx.log_extra())

        await simulate_latency(*self.config.latency_window, rng=self._rng)
        outcome = draw_outcome(self._rng)

        ctx.span.set_attributes({
            "http.method": "GET",
            "http.route": profile.route,
            "http.status_code": outcome.status_code,
        })

        error = profile.error_for(outcome)
        if error is not None:
            return self._fail(ctx, error)

        downstream_body: Optional[Payload] = None
        if profile.downstream is not None:
            target = profile.downstream
            result = await call_downstream(
                client, target, self.config.downstream_url(target.role, target.path)
            )
            if not result.ok:
                return self._fail(ctx, result.error)
            downstream_body = result.body

        payload = profile.build_payload(downstream_body)
        logger.info(profile.success_message(payload), extra=ctx.log_extra())
        ctx.span.set_status(Status(StatusCode.OK))
        return JSONResponse(payload)

    def _fail(self, ctx: RequestContext, error: TierError) -> JSONResponse:
        logger.log(error.log_level, error.log_message, extra=ctx.log_extra())
        ctx.span.set_status(Status(StatusCode.ERROR, error.span_message))
        return JSONResponse(error.to_body(), status_code=error.status_code)


def _parent_context(
    headers: Optional[Mapping[str, str]],
) -> Optional[otel_context.Context]:
    """Return the inbound trace context unless a server span is already active."""
    if trace.get_current_span().get_span_context().is_valid or not headers:
        return None
    return propagate.extract(headers)
