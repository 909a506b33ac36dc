"""
Derived (never persisted) monthly report structures.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from timetracker.models.time_entry import TimeEntry


@dataclass
class ReportTotals:
    total_hours: Decimal
    total_cost: Decimal
    formatted_cost: str


@dataclass
class RateInfo:
    pl_to_uah_rate: Decimal
    source: str
    updated_at: str


@dataclass
class MonthlyReport:
    user_id: int
    year: int
    month: int
    currency: str
    totals: ReportTotals
    rate_info: RateInfo
    items: list[TimeEntry] = field(default_factory=list)
