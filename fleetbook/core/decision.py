"""Accept/reject results returned by the booking checks."""

from dataclasses import dataclass
from typing import Optional, Type

from fleetbook.core.errors import BookingError


@dataclass(frozen=True)
class Decision:
    """
    Outcome of a booking check.

    Attributes:
        accepted: Whether the candidate booking may proceed
        reason: Human-readable rejection reason (None when accepted)
        error: Error kind describing the rejection (None when accepted)
    """
    accepted: bool
    reason: Optional[str] = None
    error: Optional[Type[BookingError]] = None

    @classmethod
    def accept(cls) -> "Decision":
        return cls(accepted=True)

    @classmethod
    def reject(cls, error: Type[BookingError], reason: str) -> "Decision":
        return cls(accepted=False, reason=reason, error=error)

    def __bool__(self) -> bool:
        return self.accepted

    def raise_for_rejection(self) -> None:
        """Raise the carried error kind if this decision is a rejection."""
        if not self.accepted:
            raise self.error(self.reason)
