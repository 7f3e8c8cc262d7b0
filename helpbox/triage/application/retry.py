"""
Triage Retry Controller
=======================

Runs one upstream call per attempt with bounded exponential backoff.

States:
- ATTEMPTING: call the operation once
- WAITING: sleep the current delay, then double it
- SUCCEEDED: the operation returned a result
- FALLEN_BACK: non-retryable error or attempts exhausted

Only an upstream 503 (model overloaded) is retried. Everything else,
including an empty model answer raised inside the attempt, falls back
immediately. The sleep function is injected so tests run without waiting.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from helpbox.core import ApplicationException, LLMException
from helpbox.shared.infrastructure.logging import get_logger
from helpbox.triage.domain import TriageResult

logger = get_logger(__name__)

SERVICE_UNAVAILABLE = 503

SleepFunc = Callable[[float], Awaitable[None]]
Operation = Callable[[], Awaitable[TriageResult]]


class RetryState(str, Enum):
    """Retry controller states."""
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FALLEN_BACK = "fallen_back"


@dataclass
class RetryOutcome:
    """What happened while running an operation under the controller."""
    result: TriageResult
    state: RetryState
    attempts: int
    delays: List[float] = field(default_factory=list)
    last_error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.state == RetryState.SUCCEEDED


def upstream_status(error: Exception) -> Optional[int]:
    """HTTP status reported by the upstream model for this error, if any."""
    if isinstance(error, LLMException):
        return error.upstream_status
    if isinstance(error, ApplicationException):
        # status_code on our own exceptions is the API answer, not upstream's
        return None
    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    return status if isinstance(status, int) else None


def is_retryable(error: Exception) -> bool:
    """Only an overloaded upstream is worth another attempt."""
    return upstream_status(error) == SERVICE_UNAVAILABLE


class RetryController:
    """
    Bounded exponential backoff around a single upstream call.

    Never raises for failures of the operation: the caller always gets a
    RetryOutcome whose result is either the operation's or the fallback.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        sleep: Optional[SleepFunc] = None,
        fallback: Callable[[], TriageResult] = TriageResult.fallback
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if initial_delay < 0:
            raise ValueError("initial_delay must not be negative")
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self._sleep = sleep or asyncio.sleep
        self._fallback = fallback

    async def run(self, operation: Operation) -> RetryOutcome:
        """
        Run the operation until it succeeds or the controller gives up.

        Args:
            operation: Zero-argument coroutine function doing one attempt

        Returns:
            RetryOutcome with the result, final state, attempt count and delays
        """
        state = RetryState.ATTEMPTING
        attempt = 0
        delay = self.initial_delay
        delays: List[float] = []
        result: Optional[TriageResult] = None
        last_error: Optional[Exception] = None

        while True:
            if state == RetryState.ATTEMPTING:
                attempt += 1
                try:
                    result = await operation()
                except Exception as e:
                    last_error = e
                    if is_retryable(e) and attempt < self.max_attempts:
                        logger.warning(
                            "Upstream unavailable, retrying",
                            extra={
                                "attempt": attempt,
                                "max_attempts": self.max_attempts,
                                "retry_in_seconds": delay,
                            }
                        )
                        state = RetryState.WAITING
                    else:
                        logger.error(
                            "Automated triage failed, using fallback",
                            extra={
                                "attempt": attempt,
                                "upstream_status": upstream_status(e),
                                "error_type": type(e).__name__,
                                "error": str(e),
                            }
                        )
                        state = RetryState.FALLEN_BACK
                else:
                    state = RetryState.SUCCEEDED

            elif state == RetryState.WAITING:
                await self._sleep(delay)
                delays.append(delay)
                delay *= 2
                state = RetryState.ATTEMPTING

            elif state == RetryState.SUCCEEDED:
                return RetryOutcome(
                    result=result,
                    state=state,
                    attempts=attempt,
                    delays=delays,
                    last_error=last_error
                )

            else:
                return RetryOutcome(
                    result=self._fallback(),
                    state=RetryState.FALLEN_BACK,
                    attempts=attempt,
                    delays=delays,
                    last_error=last_error
                )
