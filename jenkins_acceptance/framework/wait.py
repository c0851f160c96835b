# ================================================================================
# Wait Module
# ================================================================================
#
# Bounded polling for UI acceptance tests.
#
# Browser state changes asynchronously from the test's point of view: a click
# schedules an XHR, a node goes offline a few seconds after the request, a
# form validation message is rendered after blur. Everything that has to
# "wait until" goes through the Wait builder below.
#
# Key Features:
#   - Fixed-interval polling with a timeout
#   - Elastic time scaling for slow CI machines
#   - Ignored exception types (retried instead of raised)
#   - Timeout diagnosis hook (e.g. attach the agent log)
#
# Usage:
#   Wait(page_object).with_timeout(30).with_message("Agent is online").until(agent.is_online)
#
# ================================================================================

import time as _time
from typing import Any, Callable, Generic, Optional, Tuple, Type, TypeVar

from loguru import logger

from autotest_tools.common import get_float


T = TypeVar('T')
V = TypeVar('V')

DEFAULT_POLLING_INTERVAL = 0.5
DEFAULT_TIMEOUT = 120.0


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""
    pass


class ElasticTime:
    """
    Scales timeouts by a constant factor.

    Machines running the browser and Jenkins side by side on a loaded CI agent
    are slower than a developer laptop. A factor of 2.0 doubles every timeout
    and every explicit sleep the harness performs.
    """

    def __init__(self, factor: float = 1.0):
        if factor <= 0:
            raise ValueError(f"Elastic time factor must be positive: {factor}")
        self.factor = factor

    @classmethod
    def from_config(cls) -> "ElasticTime":
        return cls(get_float("time.elastic_factor", 1.0))

    def scale(self, seconds: float) -> float:
        """Return ``seconds`` adjusted by the elastic factor."""
        return seconds * self.factor

    def milliseconds(self, ms: float) -> float:
        """Scale a millisecond value, returning milliseconds."""
        return ms * self.factor

    def __repr__(self) -> str:
        return f"ElasticTime(factor={self.factor})"


class Wait(Generic[T]):
    """
    Fluent polling helper.

    The condition is evaluated at least once. Any value other than ``None``
    or ``False`` ends the wait and is returned to the caller. Exceptions of
    the ignored types are remembered and retried; anything else propagates.

    Example:
        element = (
            Wait(layer, time=ElasticTime(2.0))
            .polling_every(0.5)
            .with_timeout(10)
            .with_message("Element matching %s is present", selector)
            .ignoring(ElementNotFoundError)
            .until(lambda: layer.find(selector))
        )
    """

    def __init__(
        self,
        subject: T = None,
        time: Optional[ElasticTime] = None,
        sleeper: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            subject: Object passed to until_matches() predicates
            time: Elastic time used to scale the timeout
            sleeper: Sleeps the given number of seconds between attempts
            clock: Monotonic clock in seconds
        """
        self.subject = subject
        self.time = time or ElasticTime()
        self._sleeper = sleeper or _time.sleep
        self._clock = clock or _time.monotonic
        self._interval = DEFAULT_POLLING_INTERVAL
        self._timeout = self.time.scale(DEFAULT_TIMEOUT)
        self._message: Optional[str] = None
        self._ignored: Tuple[Type[BaseException], ...] = ()
        self._log_level = "WARNING"

    def polling_every(self, seconds: float) -> "Wait[T]":
        self._interval = seconds
        return self

    def with_timeout(self, seconds: float) -> "Wait[T]":
        """Set the timeout; the value is scaled by elastic time."""
        self._timeout = self.time.scale(seconds)
        return self

    def with_message(self, message: str, *args: Any) -> "Wait[T]":
        self._message = message % args if args else message
        return self

    def ignoring(self, *exception_types: Type[BaseException]) -> "Wait[T]":
        self._ignored = self._ignored + tuple(exception_types)
        return self

    def quietly(self) -> "Wait[T]":
        """Log the timeout at debug level; for waits whose caller handles it."""
        self._log_level = "DEBUG"
        return self

    @property
    def timeout(self) -> float:
        """Effective (already scaled) timeout in seconds."""
        return self._timeout

    def until(
        self,
        condition: Callable[[], V],
        diagnose: Optional[Callable[[Optional[BaseException], str], str]] = None,
    ) -> V:
        """
        Poll ``condition`` until it yields a value.

        Args:
            condition: Zero-argument callable
            diagnose: Called on timeout with (last ignored error, message);
                its text is appended to the timeout message

        Returns:
            The first value that is neither None nor False

        Raises:
            WaitTimeoutError: When the timeout elapses first
        """
        message = self._message or _describe(condition)
        deadline = self._clock() + self._timeout
        last_error: Optional[BaseException] = None
        attempt = 0

        while True:
            attempt += 1
            try:
                value = condition()
                if value is not None and value is not False:
                    if attempt > 1:
                        logger.debug(f"Wait satisfied after {attempt} attempts: {message}")
                    return value
            except self._ignored as e:
                last_error = e

            if self._clock() >= deadline:
                break

            self._sleeper(self._interval)

        error_msg = f"Timed out after {self._timeout:.1f}s waiting for: {message}"
        if diagnose is not None:
            error_msg += "\n" + diagnose(last_error, message)
        logger.log(self._log_level, error_msg)
        raise WaitTimeoutError(error_msg) from last_error

    def until_matches(
        self,
        predicate: Callable[[T], bool],
        description: Optional[str] = None,
    ) -> T:
        """
        Poll ``predicate(subject)`` until it holds and return the subject.

        Args:
            predicate: Check applied to the wait subject
            description: Human-readable expectation used in the timeout message
        """
        if description and not self._message:
            self._message = description
        subject = self.subject
        self.until(lambda: True if predicate(subject) else None)
        return subject


def _describe(condition: Callable[..., Any]) -> str:
    name = getattr(condition, "__name__", None)
    if name and name != "<lambda>":
        return name
    return repr(condition)


__all__ = [
    "DEFAULT_POLLING_INTERVAL",
    "DEFAULT_TIMEOUT",
    "ElasticTime",
    "Wait",
    "WaitTimeoutError",
]
