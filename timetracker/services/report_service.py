"""
Monthly cost report.

Collects a user's entries for one calendar month, prices them with the
contract formula in the base currency, converts to the requested currency and
formats the result for the matching locale. Reports are computed on every
request and never stored.
"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional
import logging

from timetracker.core.config import RateConfig, rate_config
from timetracker.core.exceptions import NotFoundError
from timetracker.models.report import MonthlyReport, RateInfo, ReportTotals
from timetracker.models.user import User
from timetracker.repositories.time_entry_repository import TimeEntryRepository
from timetracker.repositories.user_repository import UserRepository
from timetracker.services.cost_calculator import CostCalculator, UnitCost, sum_hours
from timetracker.services.currency_service import CurrencyService, currency_language
from timetracker.services.time_entry_service import validate_month

logger = logging.getLogger(__name__)

RATE_SOURCE = "config"


class ReportService:
    def __init__(
        self,
        conn: sqlite3.Connection,
        rates: Optional[RateConfig] = None,
        unit_cost: Optional[UnitCost] = None,
    ) -> None:
        logger.trace("Initializing ReportService")
        self._rates = rates or rate_config
        self._users = UserRepository(conn)
        self._entries = TimeEntryRepository(conn)
        self._calculator = CostCalculator(self._rates, unit_cost=unit_cost)
        self._currency = CurrencyService(self._rates)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            logger.warning("Report requested for unknown user id=%s", user_id)
            raise NotFoundError(f"User with id={user_id} not found")
        return user

    def generate_monthly_report(
        self,
        user_id: int,
        year: int,
        month: int,
        currency: Optional[str] = None,
    ) -> MonthlyReport:
        logger.info("Generating monthly report user id=%s period=%s-%02d", user_id, year, month)
        user = self.get_user(user_id)
        validate_month(year, month)
        target = self._currency.parse_currency(currency)

        entries = self._entries.list_by_user_and_period(user_id, year, month)
        total_hours = sum_hours(entries)
        _, cost_base = self._calculator.compute_cost(user, entries)
        cost_converted = self._currency.convert(cost_base, target)
        formatted = self._currency.format(cost_converted, currency_language(target.value))

        report = MonthlyReport(
            user_id=user_id,
            year=year,
            month=month,
            currency=target.value,
            items=entries,
            totals=ReportTotals(
                total_hours=total_hours,
                total_cost=cost_converted,
                formatted_cost=formatted,
            ),
            rate_info=RateInfo(
                pl_to_uah_rate=self._rates.pln_to_uah_rate,
                source=RATE_SOURCE,
                updated_at=datetime.now(tz=timezone.utc).isoformat(),
            ),
        )
        logger.info(
            "Monthly report ready user id=%s entries=%s cost=%s",
            user_id,
            len(entries),
            formatted,
        )
        return report
