from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, LocationStatus
from ..core.exceptions import DuplicateCheckInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, staff_id, work_date, check_in_time, check_out_time,
    latitude, longitude, office_name, location_status,
    check_out_office_name, check_out_location_status,
    status, device_id, overridden, overridden_by, override_reason, overridden_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    out_status = r.get("check_out_location_status")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        location_status=LocationStatus(r.get("location_status") or LocationStatus.UNKNOWN.value),
        office_name=r.get("office_name"),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
        device_id=r.get("device_id"),
        check_out_office_name=r.get("check_out_office_name"),
        check_out_location_status=LocationStatus(out_status) if out_status else None,
        overridden=bool(r.get("overridden")),
        overridden_by=r.get("overridden_by"),
        override_reason=r.get("override_reason"),
        overridden_at=r.get("overridden_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE staff_id=%s AND work_date=%s",
                (int(staff_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_staff(self, staff_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE staff_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(staff_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s ORDER BY check_in_time",
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_staff_between(self, staff_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE staff_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(staff_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_check_ins_between(self, staff_id: int, start: date, end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records
                WHERE staff_id=%s AND check_in_time IS NOT NULL AND work_date BETWEEN %s AND %s
                """,
                (int(staff_id), start, end),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def check_in_counts_by_staff(self) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, COUNT(*) AS n
                FROM attendance_records
                WHERE check_in_time IS NOT NULL
                GROUP BY staff_id
                """
            )
            return {int(r["staff_id"]): int(r["n"]) for r in fetchall(cur)}

    def create_checkin(
        self,
        *,
        staff_id: int,
        work_date: date,
        check_in_time: datetime,
        latitude: float,
        longitude: float,
        office_name: Optional[str],
        location_status: LocationStatus,
        status: AttendanceStatus,
        device_id: str,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        staff_id, work_date, check_in_time, latitude, longitude,
                        office_name, location_status, status, device_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(staff_id),
                        work_date,
                        check_in_time,
                        latitude,
                        longitude,
                        office_name,
                        location_status.value,
                        status.value,
                        device_id,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateCheckInError("You have already checked in today") from e
            raise

    def create_sweep_record(self, *, staff_id: int, work_date: date, status: AttendanceStatus) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(staff_id, work_date, location_status, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(staff_id), work_date, LocationStatus.UNKNOWN.value, status.value),
            )
            return int(cur.lastrowid) if cur.rowcount > 0 else None

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        office_name: Optional[str] = None,
        location_status: Optional[LocationStatus] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_office_name=%s, check_out_location_status=%s
                WHERE attendance_id=%s
                """,
                (
                    check_out_time,
                    office_name,
                    location_status.value if location_status else None,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s WHERE attendance_id=%s",
                (status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def admin_override(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        admin_id: int,
        reason: str,
        overridden_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, overridden=1, overridden_by=%s, override_reason=%s, overridden_at=%s
                WHERE attendance_id=%s
                """,
                (status.value, int(admin_id), reason, overridden_at, int(attendance_id)),
            )
            return cur.rowcount > 0
