# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: Probabilistic slot occupancy and reservation.
# ============================================================================
"""Simulated Slot Reservation.

Reference implementation of ISlotReservation without a datastore.
Occupancy and lost races are drawn from a seedable random generator:

- each slot is open with probability ``availability_rate`` (0.7)
- a whole day is booked with probability ``fully_booked_rate`` (0.1)
- a selection loses the race with probability ``race_loss_rate`` (0.05)

Reservations are tracked in a table keyed by (provider, date, hour), so a
slot held by one draft is never granted to another. Check and write happen
without an intervening await, which makes ``check_and_reserve`` atomic on
the event loop.
"""

import logging
import random
from datetime import date

logger = logging.getLogger(__name__)

OTHER_PATIENT = "__other_patient__"


def _validate_rate(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")
    return value


class SimulatedSlotReservation:
    """In-memory check-and-reserve with simulated contention."""

    def __init__(
        self,
        availability_rate: float = 0.7,
        race_loss_rate: float = 0.05,
        fully_booked_rate: float = 0.1,
        rng: random.Random | None = None,
    ):
        """Initialize simulator.

        Args:
            availability_rate: Probability that a slot is open when listed.
            race_loss_rate: Probability that another patient wins the slot
                at selection time.
            fully_booked_rate: Probability that a whole day is booked.
            rng: Random generator (pass a seeded one for reproducibility).

        Raises:
            ValueError: If a rate is outside [0, 1].
        """
        self._availability_rate = _validate_rate("availability_rate", availability_rate)
        self._race_loss_rate = _validate_rate("race_loss_rate", race_loss_rate)
        self._fully_booked_rate = _validate_rate("fully_booked_rate", fully_booked_rate)
        self._rng = rng or random.Random()
        self._reservations: dict[tuple[str, date, int], str] = {}

    def holder_of(self, provider_id: str, day: date, hour: int) -> str | None:
        return self._reservations.get((provider_id, day, hour))

    async def is_day_fully_booked(self, provider_id: str, day: date) -> bool:
        return self._rng.random() < self._fully_booked_rate

    async def is_slot_open(self, provider_id: str, day: date, hour: int) -> bool:
        if (provider_id, day, hour) in self._reservations:
            return False
        return self._rng.random() < self._availability_rate

    async def check_and_reserve(self, provider_id: str, day: date, hour: int, holder_id: str) -> bool:
        key = (provider_id, day, hour)
        current = self._reservations.get(key)
        if current is not None:
            return current == holder_id

        if self._rng.random() < self._race_loss_rate:
            self._reservations[key] = OTHER_PATIENT
            logger.info(f"Simulated race loss on {provider_id} {day.isoformat()} {hour:02d}:00")
            return False

        self._reservations[key] = holder_id
        return True

    async def release(self, provider_id: str, day: date, hour: int, holder_id: str) -> None:
        key = (provider_id, day, hour)
        if self._reservations.get(key) == holder_id:
            del self._reservations[key]
