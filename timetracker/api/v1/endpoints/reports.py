"""
Report endpoints:
  GET /reports/monthly       – Monthly cost report (JSON)
  GET /reports/monthly/pdf   – Monthly cost report (PDF download)
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from timetracker.core.dependencies import db_dependency, get_current_user
from timetracker.core.exceptions import PermissionDeniedError
from timetracker.models.user import User, UserRole
from timetracker.schemas.report import MonthlyReportResponse
from timetracker.services.pdf_service import ReportPdfService
from timetracker.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def _target_user_id(user_id: Optional[int], current_user: User) -> int:
    """Default to the acting user; employees may only see their own report."""
    target = user_id if user_id is not None else current_user.id
    if current_user.role == UserRole.EMPLOYEE and target != current_user.id:
        raise PermissionDeniedError("You can only view your own reports")
    return target


@router.get("/monthly", response_model=MonthlyReportResponse, summary="Monthly cost report")
def monthly_report(
    year: int = Query(..., description="Report year, e.g. 2025"),
    month: int = Query(..., description="Report month (1-12)"),
    user_id: Optional[int] = Query(None, description="Defaults to the current user"),
    currency: str = Query("PLN", description="PLN, UAH or USD"),
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    """
    Hours and cost of a user's entries for one month.

    UOP cost uses the monthly gross rate divided by the standard monthly hours,
    B2B cost the hourly net rate. The amount is converted into **currency** and
    formatted for its locale (`PLN` -> `1 234,56 zł`, `UAH` -> `1 234,56 ₴`,
    `USD` -> `$1,234.56`).
    """
    target = _target_user_id(user_id, current_user)
    return ReportService(conn).generate_monthly_report(target, year, month, currency)


@router.get(
    "/monthly/pdf",
    summary="Export the monthly cost report as PDF",
    response_class=StreamingResponse,
)
def monthly_report_pdf(
    year: int = Query(...),
    month: int = Query(...),
    user_id: Optional[int] = Query(None),
    currency: str = Query("PLN"),
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    target = _target_user_id(user_id, current_user)
    service = ReportService(conn)
    report = service.generate_monthly_report(target, year, month, currency)
    logger.info("Exporting monthly report PDF user id=%s", target)
    pdf_buffer = ReportPdfService().render(report, service.get_user(target))
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={
            "Content-Disposition": (
                f"attachment; filename=report_{target}_{year}_{month:02d}.pdf"
            )
        },
    )
