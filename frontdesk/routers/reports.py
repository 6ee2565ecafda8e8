"""
Report routes
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import DailyReportRequest, DailyReportResponse
from frontdesk.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/daily", response_model=DailyReportResponse)
def generate_daily_report(data: DailyReportRequest, db: Session = Depends(get_db)):
    return ReportService(db).generate_daily_report(data.report_date)


@router.get("/daily", response_model=List[DailyReportResponse])
def get_daily_reports(limit: int = 30, db: Session = Depends(get_db)):
    return ReportService(db).get_daily_reports(limit)
