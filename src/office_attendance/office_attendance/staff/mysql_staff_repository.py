from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PermissionType, StaffStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Permission, Staff
from .repository import StaffRepository

_STAFF_COLUMNS = """
    staff_id, name, email, status, device_id, monthly_absence,
    warning_sent_month, query_sent_month,
    permission_type, permission_reason, permission_start, permission_end
"""

_ARCHIVE_CURRENT = """
    INSERT INTO staff_permission_history(staff_id, permission_type, reason, start_date, end_date)
    SELECT staff_id, permission_type, permission_reason, permission_start, permission_end
    FROM staff
    WHERE staff_id=%s AND permission_type IS NOT NULL
"""


def _to_staff(r: dict) -> Staff:
    permission = None
    if r.get("permission_type"):
        permission = Permission(
            permission_type=PermissionType(r["permission_type"]),
            reason=r.get("permission_reason"),
            start_date=r["permission_start"],
            end_date=r["permission_end"],
        )
    return Staff(
        staff_id=int(r["staff_id"]),
        name=r["name"],
        email=r["email"],
        status=StaffStatus(r["status"]),
        permission=permission,
        device_id=r.get("device_id"),
        monthly_absence=int(r.get("monthly_absence") or 0),
        warning_sent_month=r.get("warning_sent_month"),
        query_sent_month=r.get("query_sent_month"),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STAFF_COLUMNS} FROM staff WHERE staff_id=%s", (int(staff_id),))
            r = fetchone(cur)
            return _to_staff(r) if r else None

    def get_by_device(self, device_id: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STAFF_COLUMNS} FROM staff WHERE device_id=%s", (device_id,))
            r = fetchone(cur)
            return _to_staff(r) if r else None

    def list_all(self) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STAFF_COLUMNS} FROM staff ORDER BY staff_id")
            return [_to_staff(r) for r in fetchall(cur)]

    def list_with_permission(self) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STAFF_COLUMNS} FROM staff WHERE permission_type IS NOT NULL ORDER BY name")
            return [_to_staff(r) for r in fetchall(cur)]

    def list_with_expired_permission(self, now: datetime) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STAFF_COLUMNS}
                FROM staff
                WHERE permission_type IS NOT NULL AND permission_end < %s
                ORDER BY staff_id
                """,
                (now,),
            )
            return [_to_staff(r) for r in fetchall(cur)]

    def bind_device(self, staff_id: int, device_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE staff SET device_id=%s WHERE staff_id=%s AND device_id IS NULL",
                (device_id, int(staff_id)),
            )
            return cur.rowcount > 0

    def set_permission(self, staff_id: int, *, permission: Permission, status: StaffStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ARCHIVE_CURRENT, (int(staff_id),))
            cur.execute(
                """
                UPDATE staff
                SET permission_type=%s, permission_reason=%s, permission_start=%s, permission_end=%s, status=%s
                WHERE staff_id=%s
                """,
                (
                    permission.permission_type.value,
                    permission.reason,
                    permission.start_date,
                    permission.end_date,
                    status.value,
                    int(staff_id),
                ),
            )
            return cur.rowcount > 0

    def archive_permission(self, staff_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ARCHIVE_CURRENT, (int(staff_id),))
            if cur.rowcount == 0:
                return False
            cur.execute(
                """
                UPDATE staff
                SET permission_type=NULL, permission_reason=NULL, permission_start=NULL, permission_end=NULL,
                    status=%s
                WHERE staff_id=%s
                """,
                (StaffStatus.ACTIVE.value, int(staff_id)),
            )
            return True

    def list_permission_history(self, staff_id: int) -> Sequence[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT permission_type, reason, start_date, end_date
                FROM staff_permission_history
                WHERE staff_id=%s
                ORDER BY start_date
                """,
                (int(staff_id),),
            )
            return [
                Permission(
                    permission_type=PermissionType(r["permission_type"]),
                    reason=r.get("reason"),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                )
                for r in fetchall(cur)
            ]

    def increment_monthly_absence(self, staff_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE staff SET monthly_absence=monthly_absence+1 WHERE staff_id=%s", (int(staff_id),))

    def decrement_monthly_absence(self, staff_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE staff SET monthly_absence=GREATEST(monthly_absence-1, 0) WHERE staff_id=%s",
                (int(staff_id),),
            )

    def set_monthly_absence(self, staff_id: int, count: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE staff SET monthly_absence=%s WHERE staff_id=%s", (int(count), int(staff_id)))

    def stamp_warning_sent(self, staff_id: int, month: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff SET warning_sent_month=%s
                WHERE staff_id=%s AND (warning_sent_month IS NULL OR warning_sent_month<>%s)
                """,
                (month, int(staff_id), month),
            )
            return cur.rowcount > 0

    def stamp_query_sent(self, staff_id: int, month: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE staff SET query_sent_month=%s
                WHERE staff_id=%s AND (query_sent_month IS NULL OR query_sent_month<>%s)
                """,
                (month, int(staff_id), month),
            )
            return cur.rowcount > 0

    def delete_by_id(self, staff_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM staff WHERE staff_id=%s", (int(staff_id),))
            return cur.rowcount > 0
