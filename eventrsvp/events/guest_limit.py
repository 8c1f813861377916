import math
from dataclasses import dataclass


@dataclass(frozen=True)
class GuestLimitResult:
    valid: bool
    # math.inf when no cap applies
    remaining: int | float
    error: str | None = None

    @property
    def unlimited(self) -> bool:
        return math.isinf(self.remaining)


def effective_guest_cap(global_cap: int | None, guest_cap: int | None = None) -> int | None:
    """Per-guest override wins over the event-wide cap; ``None`` means unlimited."""
    return guest_cap if guest_cap is not None else global_cap


def validate_guest_limit(
    global_cap: int | None,
    additional_guests_count: int,
    guest_cap: int | None = None,
) -> GuestLimitResult:
    """
    Check an invitee's additional-guest count against their effective cap.

    Caps count the invitee themself, so a cap of 3 leaves room for two
    additional guests.
    """
    cap = effective_guest_cap(global_cap, guest_cap)
    if cap is None:
        return GuestLimitResult(valid=True, remaining=math.inf)

    total_guests = 1 + additional_guests_count
    if total_guests > cap:
        allowed = max(cap - 1, 0)
        plural = "" if allowed == 1 else "s"
        return GuestLimitResult(
            valid=False,
            remaining=0,
            error=(
                f"You can only bring {allowed} additional guest{plural} "
                f"(total of {cap} including yourself)"
            ),
        )

    return GuestLimitResult(valid=True, remaining=max(cap - total_guests, 0))
