"""
Pydantic schemas for the monthly report response.
"""
from decimal import Decimal

from pydantic import BaseModel

from timetracker.schemas.time_entry import TimeEntryResponse


class ReportTotalsResponse(BaseModel):
    total_hours: Decimal
    total_cost: Decimal
    formatted_cost: str

    model_config = {"from_attributes": True}


class RateInfoResponse(BaseModel):
    pl_to_uah_rate: Decimal
    source: str
    updated_at: str

    model_config = {"from_attributes": True}


class MonthlyReportResponse(BaseModel):
    """Monthly report: entries of the period, totals and the rate used."""

    user_id: int
    year: int
    month: int
    currency: str
    items: list[TimeEntryResponse]
    totals: ReportTotalsResponse
    rate_info: RateInfoResponse

    model_config = {"from_attributes": True}
