"""
Contract-specific cost formula.

UOP: hourly rate = monthly gross / monthly hours, rounded to 2 places half-up,
     then multiplied by the hours worked.
B2B: hours worked * hourly net rate.

All arithmetic is Decimal; the per-hour rate is rounded before multiplying,
never the final total.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Iterable, Optional
import logging

from timetracker.core.config import RateConfig, rate_config
from timetracker.models.time_entry import TimeEntry
from timetracker.models.user import ContractType, User

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

UnitCost = Callable[[TimeEntry], Decimal]


def no_unit_cost(entry: TimeEntry) -> Decimal:
    """Default policy: quantity-billed entries add nothing to the cost."""
    return Decimal("0")


def sum_hours(entries: Iterable[TimeEntry]) -> Decimal:
    """Sum total_hours, counting entries without hours as zero."""
    return sum(
        (entry.total_hours for entry in entries if entry.total_hours is not None),
        Decimal("0"),
    )


class CostCalculator:
    def __init__(
        self,
        rates: Optional[RateConfig] = None,
        unit_cost: Optional[UnitCost] = None,
    ) -> None:
        self._rates = rates or rate_config
        self._unit_cost = unit_cost or no_unit_cost

    def hourly_rate(self, user: User) -> Optional[Decimal]:
        """Return the per-hour rate for *user*, or None when no rate applies."""
        if user.contract_type == ContractType.UOP and user.uop_gross_rate is not None:
            return (user.uop_gross_rate / Decimal(self._rates.monthly_hours)).quantize(
                CENT, rounding=ROUND_HALF_UP
            )
        if user.contract_type == ContractType.B2B and user.b2b_hourly_net_rate is not None:
            return user.b2b_hourly_net_rate
        return None

    def compute_cost(self, user: User, entries: Iterable[TimeEntry]) -> tuple[Decimal, Decimal]:
        """Return (total hours, total cost in the base currency)."""
        entries = list(entries)
        total_hours = sum_hours(entries)
        rate = self.hourly_rate(user)
        total_cost = total_hours * rate if rate is not None else Decimal("0")
        unit_total = sum((self._unit_cost(entry) for entry in entries), Decimal("0"))
        logger.info(
            "Computed cost user id=%s contract=%s hours=%s rate=%s cost=%s",
            user.id,
            user.contract_type.value,
            total_hours,
            rate,
            total_cost + unit_total,
        )
        return total_hours, total_cost + unit_total
