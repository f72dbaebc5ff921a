"""Timeout- and retry-bounded client for the Sanity HTTP query API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx
from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt, wait_fixed

from config import ProviderConfig
from utils.exceptions import GatewayError, invalid_upstream_response, upstream_error, upstream_timeout


logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class RetryDecision(str, Enum):
    """Outcome classification driving the retry loop."""

    SUCCEED = "succeed"
    RETRY = "retry"
    FAIL = "fail"


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one HTTP attempt, captured without raising."""

    attempt: int
    status_code: Optional[int] = None
    body: Any = None
    timed_out: bool = False
    transport_error: Optional[str] = None
    invalid_body: bool = False

    @property
    def body_error(self) -> Optional[Any]:
        if isinstance(self.body, Mapping):
            return self.body.get("error")
        return None


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code == 429


def classify_outcome(outcome: AttemptOutcome) -> RetryDecision:
    """Pure retry policy: transient failures retry, everything else is terminal."""
    if outcome.timed_out or outcome.transport_error:
        return RetryDecision.RETRY
    status = outcome.status_code
    if status is None:
        return RetryDecision.FAIL
    if 200 <= status < 300:
        if outcome.invalid_body or outcome.body_error is not None:
            return RetryDecision.FAIL
        return RetryDecision.SUCCEED
    if is_retryable_status(status):
        return RetryDecision.RETRY
    return RetryDecision.FAIL


def build_query_url(config: ProviderConfig, query: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Deterministic query URL; GROQ params are JSON-encoded as ``$name``."""
    host = "apicdn.sanity.io" if config.use_cdn else "api.sanity.io"
    version = str(config.api_version or "").strip().lstrip("vV")
    pairs = [("query", query)]
    for name in sorted(params or {}):
        pairs.append((f"${name}", json.dumps(params[name])))
    pairs.append(("perspective", "published"))
    return f"https://{config.project_id}.{host}/v{version}/data/query/{config.dataset}?{urlencode(pairs)}"


def build_headers(config: ProviderConfig) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if config.read_token:
        headers["Authorization"] = f"Bearer {config.read_token}"
    return headers


class SanityQueryClient:
    """
    Executes GROQ queries with per-attempt timeouts and a fixed-delay retry budget.

    Holds only immutable configuration; each ``query`` call owns its own HTTP
    client and retry state, so concurrent calls never interfere.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return max(1, self.config.max_retries + 1)

    @property
    def timeout_seconds(self) -> float:
        return self.config.request_timeout_ms / 1000.0

    async def query(self, query: str, params: Optional[Dict[str, Any]] = None, *, resource: str = "content") -> Any:
        """
        Run one logical query and return the ``result`` payload.

        Raises:
            GatewayError: UPSTREAM_TIMEOUT, UPSTREAM_ERROR or VALIDATION_ERROR
        """
        url = build_query_url(self.config, query, params)
        headers = build_headers(self.config)

        attempts = {"count": 0}

        async def _attempt() -> AttemptOutcome:
            attempts["count"] += 1
            return await self._send(url, headers, attempt=attempts["count"])

        def _log_retry(state: RetryCallState) -> None:
            outcome: AttemptOutcome = state.outcome.result()
            reason = "timeout" if outcome.timed_out else ("network" if outcome.transport_error else f"status {outcome.status_code}")
            logger.warning(
                f"[Sanity] Retrying {resource} query after {reason} "
                f"(attempt {outcome.attempt}/{self.max_attempts}, delay {self.config.retry_delay_ms}ms)"
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.config.retry_delay_ms / 1000.0),
            retry=retry_if_result(lambda outcome: classify_outcome(outcome) is RetryDecision.RETRY),
            sleep=self._sleep,
            before_sleep=_log_retry,
            retry_error_callback=lambda state: state.outcome.result(),
        )
        outcome = await retrying(_attempt)
        return self._resolve(outcome, resource=resource)

    async def _send(self, url: str, headers: Dict[str, str], *, attempt: int) -> AttemptOutcome:
        timeout = httpx.Timeout(self.timeout_seconds)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(client.get(url, headers=headers), timeout=self.timeout_seconds)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return AttemptOutcome(attempt=attempt, timed_out=True)
        except httpx.RequestError as exc:
            return AttemptOutcome(attempt=attempt, transport_error=type(exc).__name__)

        status = response.status_code
        if not 200 <= status < 300:
            return AttemptOutcome(attempt=attempt, status_code=status)

        try:
            body = response.json()
        except ValueError:
            return AttemptOutcome(attempt=attempt, status_code=status, invalid_body=True)
        if not isinstance(body, Mapping):
            return AttemptOutcome(attempt=attempt, status_code=status, body=body, invalid_body=True)
        return AttemptOutcome(attempt=attempt, status_code=status, body=body)

    def _resolve(self, outcome: AttemptOutcome, *, resource: str) -> Any:
        decision = classify_outcome(outcome)
        if decision is RetryDecision.SUCCEED:
            body = outcome.body
            if "result" not in body:
                raise invalid_upstream_response(resource, "missing result")
            return body["result"]

        error = self._terminal_error(outcome, resource=resource)
        logger.error(f"[Sanity] {resource} query failed after {outcome.attempt} attempt(s): {error.code.value}")
        raise error

    def _terminal_error(self, outcome: AttemptOutcome, *, resource: str) -> GatewayError:
        if outcome.timed_out:
            return upstream_timeout(resource, attempts=outcome.attempt)
        if outcome.transport_error:
            return upstream_error(resource, attempts=outcome.attempt, reason=outcome.transport_error)

        status = outcome.status_code or 502
        if 200 <= status < 300:
            if outcome.invalid_body:
                return invalid_upstream_response(resource, "invalid JSON body")
            description = outcome.body_error
            if isinstance(description, Mapping):
                description = description.get("description")
            return upstream_error(resource, description=str(description or "query error"))
        if is_retryable_status(status):
            return upstream_error(resource, status_code=status, status=status, attempts=outcome.attempt)
        return upstream_error(resource, status=status)
