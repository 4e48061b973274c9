"""
Cancellation tokens for chunking calls.

A token combines an explicit cancel flag with an optional deadline. Chunkers
call ``token.check()`` before starting and periodically while walking a
tree; ``check()`` raises CancelledError or DeadlineExceededError so callers
can tell the two apart.

    token = CancellationToken(timeout=2.0)
    result = registry.chunk(source_file, token)

Tokens are safe to share between threads: the flag is a threading.Event and
the deadline never changes after construction.
"""

import threading
import time
from typing import Optional

from chunkforge.core.exceptions import CancelledError, DeadlineExceededError


class CancellationToken:
    """Cancel flag plus optional monotonic deadline."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        deadline: Optional[float] = None,
    ) -> None:
        """
        Args:
            timeout: Seconds from now after which the token expires.
            deadline: Absolute time.monotonic() value after which the token
                expires. Ignored when timeout is given.
        """
        self._event = threading.Event()
        self.timeout = timeout
        if timeout is not None:
            self.deadline: Optional[float] = time.monotonic() + timeout
        else:
            self.deadline = deadline

    @classmethod
    def none(cls) -> "CancellationToken":
        """A token that never fires unless cancelled explicitly."""
        return cls()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the token was cancelled or its deadline passed.

        An explicit cancel wins over an expired deadline.
        """
        if self._event.is_set():
            raise CancelledError("Operation cancelled")
        if self.expired:
            raise DeadlineExceededError(
                "Operation deadline exceeded", timeout=self.timeout
            )

    def __repr__(self) -> str:
        return (
            f"CancellationToken(cancelled={self.cancelled}, "
            f"remaining={self.remaining()})"
        )
