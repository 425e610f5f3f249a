from __future__ import annotations

from typing import Any

from .data_model import DataModel
from .exceptions import DeadlineExceededError
from .time import Time


class Context(DataModel):
    """
    Call context passed unchanged into every remote call.

    Attributes:
        id: Optional identifier for diagnostics.
        data: Free-form values attached by the caller.
        deadline: Absolute deadline in seconds since epoch.
        cancelled: Set once the caller gives up on the operation.
    """

    id: str | None = None
    data: dict[str, Any] | None = None
    deadline: float | None = None
    cancelled: bool = False

    @classmethod
    def with_timeout(cls, seconds: float, **kwargs: Any) -> Context:
        return cls(deadline=Time.now() + seconds, **kwargs)

    def cancel(self) -> None:
        self.cancelled = True

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(self.deadline - Time.now(), 0.0)

    def expired(self) -> bool:
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def raise_if_done(self) -> None:
        if self.cancelled:
            raise DeadlineExceededError("context cancelled")
        if self.expired():
            raise DeadlineExceededError("context deadline exceeded")

    def for_cleanup(self, grace: float) -> Context:
        """Context for a compensating call.

        A live context is returned as is. Once it is cancelled or past
        its deadline, a detached context with a fresh deadline of
        `grace` seconds is returned instead.
        """
        if not self.expired():
            return self
        return Context.with_timeout(grace, id=self.id, data=self.data)
