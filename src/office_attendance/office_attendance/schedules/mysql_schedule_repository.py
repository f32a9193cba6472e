from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OfficeDayPolicy, StaffSchedule
from .repository import ScheduleRepository


def _to_policy(r: dict) -> OfficeDayPolicy:
    days = tuple(d for d in (r.get("days") or "").split(",") if d)
    return OfficeDayPolicy(days=days, version=int(r["version"]), week_start=r.get("week_start"))


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_office_day_policy(self) -> Optional[OfficeDayPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT days, week_start, version FROM office_day_policy WHERE policy_id=1")
            r = fetchone(cur)
            return _to_policy(r) if r else None

    def save_office_day_policy(self, *, days: Sequence[str], week_start: Optional[date] = None) -> OfficeDayPolicy:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO office_day_policy(policy_id, days, week_start, version)
                VALUES(1, %s, %s, 1)
                ON DUPLICATE KEY UPDATE days=VALUES(days), week_start=VALUES(week_start), version=version+1
                """,
                (",".join(days), week_start),
            )
            cur.execute("SELECT days, week_start, version FROM office_day_policy WHERE policy_id=1")
            return _to_policy(fetchone(cur))

    def clear_office_day_policy(self) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM office_day_policy WHERE policy_id=1")
            return cur.rowcount > 0

    def is_date_assigned(self, *, staff_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1
                FROM schedule_dates sd
                JOIN schedules sc ON sc.schedule_id = sd.schedule_id
                WHERE sc.staff_id=%s AND sd.work_date=%s
                LIMIT 1
                """,
                (int(staff_id), work_date),
            )
            return fetchone(cur) is not None

    def replace_schedule(
        self,
        *,
        staff_id: int,
        start_date: date,
        end_date: date,
        days_per_week: Optional[int] = None,
        assigned_dates: Sequence[date] = (),
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM schedules WHERE staff_id=%s AND start_date<=%s AND end_date>=%s",
                (int(staff_id), end_date, start_date),
            )
            cur.execute(
                "INSERT INTO schedules(staff_id, start_date, end_date, days_per_week) VALUES(%s,%s,%s,%s)",
                (int(staff_id), start_date, end_date, days_per_week),
            )
            schedule_id = int(cur.lastrowid)
            if assigned_dates:
                cur.executemany(
                    "INSERT INTO schedule_dates(schedule_id, work_date) VALUES(%s,%s)",
                    [(schedule_id, d) for d in assigned_dates],
                )
            return schedule_id

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[StaffSchedule]:
        clauses = ["sc.start_date <= %s", "sc.end_date >= %s"]
        params: list[object] = [end, start]
        if staff_id is not None:
            clauses.append("sc.staff_id=%s")
            params.append(int(staff_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sc.schedule_id, sc.staff_id, sc.start_date, sc.end_date, sc.days_per_week, sd.work_date
                FROM schedules sc
                LEFT JOIN schedule_dates sd ON sd.schedule_id = sc.schedule_id
                WHERE {where}
                ORDER BY sc.staff_id ASC, sc.start_date ASC, sd.work_date ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        grouped: dict[int, dict] = {}
        for r in rows:
            sid = int(r["schedule_id"])
            item = grouped.get(sid)
            if not item:
                item = {
                    "schedule_id": sid,
                    "staff_id": int(r["staff_id"]),
                    "start_date": r["start_date"],
                    "end_date": r["end_date"],
                    "days_per_week": r.get("days_per_week"),
                    "assigned_dates": [],
                }
                grouped[sid] = item
            if r.get("work_date"):
                item["assigned_dates"].append(r["work_date"])

        return [
            StaffSchedule(
                schedule_id=g["schedule_id"],
                staff_id=g["staff_id"],
                start_date=g["start_date"],
                end_date=g["end_date"],
                days_per_week=int(g["days_per_week"]) if g["days_per_week"] is not None else None,
                assigned_dates=tuple(g["assigned_dates"]),
            )
            for g in grouped.values()
        ]
