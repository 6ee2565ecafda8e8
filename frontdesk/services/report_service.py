"""
Report service
Daily front-desk report: room counts, arrivals and departures, cash movement
"""
from typing import List, Optional
from datetime import date, datetime, timedelta
import logging
from sqlalchemy.orm import Session

from frontdesk.domain.charges import ZERO
from frontdesk.models.ontology import DailyReport, Payment, Room, RoomStatus, StayRecord

logger = logging.getLogger(__name__)


class ReportService:
    """Report service"""

    def __init__(self, db: Session):
        self.db = db

    def generate_daily_report(self, target_date: Optional[date] = None) -> DailyReport:
        """
        Compute and store the report for a day (default today)

        Cash in counts non-refund payments, cash out counts refunds. Running it
        again for the same day replaces the stored figures.
        """
        target_date = target_date or date.today()
        day_start = datetime.combine(target_date, datetime.min.time())
        day_end = day_start + timedelta(days=1)

        rooms = self.db.query(Room).all()
        occupied = len([r for r in rooms if r.status == RoomStatus.OCCUPIED])
        vacant = len([r for r in rooms if r.status == RoomStatus.VACANT])
        need_cleaning = len([r for r in rooms if r.status == RoomStatus.CLEANING])

        check_ins = self.db.query(StayRecord).filter(
            StayRecord.check_in_time >= day_start,
            StayRecord.check_in_time < day_end
        ).count()
        check_outs = self.db.query(StayRecord).filter(
            StayRecord.expected_check_out >= day_start,
            StayRecord.expected_check_out < day_end
        ).count()

        payments = self.db.query(Payment).filter(
            Payment.payment_time >= day_start,
            Payment.payment_time < day_end
        ).all()
        cash_in = sum((p.amount for p in payments if not p.is_refund), ZERO)
        cash_out = sum((p.amount for p in payments if p.is_refund), ZERO)

        report = self.db.query(DailyReport).filter(DailyReport.report_date == target_date).first()
        if report is None:
            report = DailyReport(report_date=target_date)
            self.db.add(report)

        report.total_rooms = len(rooms)
        report.occupied_rooms = occupied
        report.vacant_rooms = vacant
        report.rooms_need_cleaning = need_cleaning
        report.expected_check_ins = check_ins
        report.expected_check_outs = check_outs
        report.cash_in = cash_in
        report.cash_out = cash_out
        report.total_revenue = cash_in - cash_out

        self.db.commit()
        self.db.refresh(report)
        logger.info(
            f"Daily report for {target_date}: in={cash_in} out={cash_out} "
            f"occupied={occupied}/{len(rooms)}"
        )
        return report

    def get_daily_reports(self, limit: int = 30) -> List[DailyReport]:
        return self.db.query(DailyReport).order_by(
            DailyReport.report_date.desc()
        ).limit(limit).all()
