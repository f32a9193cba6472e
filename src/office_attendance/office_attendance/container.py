from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import LocalClock
from .compliance.service import ComplianceAggregator
from .core.constants import DEFAULT_OFFICE_RADIUS_METERS, DEFAULT_UTC_OFFSET_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .geo.matcher import DEFAULT_OFFICES, GeoMatcher
from .jobs.daily_report import DailyReportJob
from .jobs.end_of_day import EndOfDaySweeper
from .notifications.notifier import Notifier, OutboxNotifier, SMTPNotifier, SMTPSettings
from .reports.service import AttendanceReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.resolver import ScheduleResolver
from .schedules.service import ScheduleService
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.permissions import PermissionGate
from .staff.service import StaffService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: LocalClock
    notifier: Notifier

    staff_repo: MySQLStaffRepository
    attendance_repo: MySQLAttendanceRepository
    schedules_repo: MySQLScheduleRepository

    geo: GeoMatcher
    permission_gate: PermissionGate
    schedule_resolver: ScheduleResolver

    attendance_service: AttendanceService
    staff_service: StaffService
    schedule_service: ScheduleService
    report_service: AttendanceReportService
    compliance: ComplianceAggregator
    end_of_day_sweeper: EndOfDaySweeper
    daily_report: DailyReportJob


def build_notifier(settings: Any) -> Notifier:
    host = getattr(settings, "SMTP_HOST", "")
    if not host:
        logger.warning("SMTP_HOST not set; e-mails are not delivered, only the last %s are kept in memory", OutboxNotifier.limit)
        return OutboxNotifier()
    return SMTPNotifier(
        SMTPSettings(
            host=host,
            port=int(getattr(settings, "SMTP_PORT", 587)),
            user=getattr(settings, "SMTP_USER", ""),
            password=getattr(settings, "SMTP_PASSWORD", ""),
            sender=getattr(settings, "MAIL_FROM", ""),
        )
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = LocalClock.from_offset(float(getattr(settings, "ORG_UTC_OFFSET_HOURS", DEFAULT_UTC_OFFSET_HOURS)))
    notifier = build_notifier(settings)
    admin_emails = list(getattr(settings, "ADMIN_EMAILS", []))

    offices = getattr(settings, "OFFICES", None)
    radius = float(getattr(settings, "OFFICE_RADIUS_METERS", DEFAULT_OFFICE_RADIUS_METERS))
    geo = GeoMatcher.from_settings(offices, radius_meters=radius) if offices else GeoMatcher(DEFAULT_OFFICES, radius_meters=radius)

    staff_repo = MySQLStaffRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)

    factory = AttendanceStrategyFactory()
    permission_gate = PermissionGate(staff_repo, clock=clock)
    schedule_resolver = ScheduleResolver(schedules_repo)

    attendance_service = AttendanceService(
        attendance_repo,
        staff_repo,
        geo,
        permission_gate,
        schedule_resolver,
        clock=clock,
        strategy_factory=factory,
    )
    report_service = AttendanceReportService(attendance_repo, staff_repo, permission_gate, clock=clock)

    return Container(
        conn=conn,
        clock=clock,
        notifier=notifier,
        staff_repo=staff_repo,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        geo=geo,
        permission_gate=permission_gate,
        schedule_resolver=schedule_resolver,
        attendance_service=attendance_service,
        staff_service=StaffService(staff_repo, permission_gate, clock=clock),
        schedule_service=ScheduleService(schedules_repo, staff_repo),
        report_service=report_service,
        compliance=ComplianceAggregator(
            attendance_repo,
            staff_repo,
            permission_gate,
            notifier,
            admin_emails=admin_emails,
            clock=clock,
        ),
        end_of_day_sweeper=EndOfDaySweeper(
            attendance_repo,
            staff_repo,
            permission_gate,
            schedule_resolver,
            clock=clock,
            strategy_factory=factory,
        ),
        daily_report=DailyReportJob(report_service, notifier, recipients=admin_emails),
    )
