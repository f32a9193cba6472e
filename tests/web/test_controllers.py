from flask import Flask

from office_attendance.attendance.controller import register as register_attendance
from office_attendance.attendance.service import AttendanceService
from office_attendance.common.datetime_utils import LocalClock
from office_attendance.compliance.service import ComplianceAggregator
from office_attendance.container import Container
from office_attendance.geo.matcher import GeoMatcher
from office_attendance.jobs.daily_report import DailyReportJob
from office_attendance.jobs.end_of_day import EndOfDaySweeper
from office_attendance.notifications.notifier import OutboxNotifier
from office_attendance.reports.service import AttendanceReportService
from office_attendance.schedules.controller import register as register_schedules
from office_attendance.schedules.resolver import ScheduleResolver
from office_attendance.schedules.service import ScheduleService
from office_attendance.staff.controller import register as register_staff
from office_attendance.staff.permissions import PermissionGate
from office_attendance.staff.service import StaffService
from tests.fakes import InMemoryAttendance, InMemorySchedules, InMemoryStaff, make_staff

HEAD_OFFICE = {"latitude": 6.5244, "longitude": 3.3792}


def make_app():
    clock = LocalClock()
    staff_repo = InMemoryStaff(make_staff(1), make_staff(2, device_id="phone-2"), make_staff(9, name="Admin"))
    attendance_repo = InMemoryAttendance()
    schedules_repo = InMemorySchedules()
    notifier = OutboxNotifier()
    geo = GeoMatcher()
    gate = PermissionGate(staff_repo, clock=clock)
    resolver = ScheduleResolver(schedules_repo)
    reports = AttendanceReportService(attendance_repo, staff_repo, gate, clock=clock)

    container = Container(
        conn=None,
        clock=clock,
        notifier=notifier,
        staff_repo=staff_repo,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        geo=geo,
        permission_gate=gate,
        schedule_resolver=resolver,
        attendance_service=AttendanceService(attendance_repo, staff_repo, geo, gate, resolver, clock=clock),
        staff_service=StaffService(staff_repo, gate, clock=clock),
        schedule_service=ScheduleService(schedules_repo, staff_repo),
        report_service=reports,
        compliance=ComplianceAggregator(attendance_repo, staff_repo, gate, notifier, clock=clock),
        end_of_day_sweeper=EndOfDaySweeper(attendance_repo, staff_repo, gate, resolver, clock=clock),
        daily_report=DailyReportJob(reports, notifier, recipients=["admin@example.com"]),
    )

    app = Flask(__name__)
    app.secret_key = "test"
    register_attendance(app, container)
    register_staff(app, container)
    register_schedules(app, container)
    return app, container


def login(client, staff_id, role="staff"):
    with client.session_transaction() as sess:
        sess["staff_id"] = staff_id
        sess["role"] = role


def test_check_in_requires_session():
    app, _ = make_app()
    client = app.test_client()

    resp = client.post("/api/attendance/check-in", json={**HEAD_OFFICE, "device_id": "phone-1"})

    assert resp.status_code == 401


def test_check_in_then_duplicate_is_benign():
    app, container = make_app()
    client = app.test_client()
    login(client, 1)

    first = client.post("/api/attendance/check-in", json={**HEAD_OFFICE, "device_id": "phone-1"})
    second = client.post("/api/attendance/check-in", json={**HEAD_OFFICE, "device_id": "phone-1"})

    assert first.status_code == 200
    assert first.get_json()["status"] in {"Present", "Late", "Absent"}
    assert second.status_code == 200
    assert second.get_json()["already_checked_in"] is True
    assert len(container.attendance_repo.by_id) == 1


def test_check_in_errors_map_to_status_codes():
    app, _ = make_app()
    client = app.test_client()
    login(client, 1)

    bad = client.post("/api/attendance/check-in", json={"latitude": "north", "longitude": 3.3, "device_id": "x"})
    reused = client.post("/api/attendance/check-in", json={**HEAD_OFFICE, "device_id": "phone-2"})

    assert bad.status_code == 400
    assert reused.status_code == 403
    assert reused.get_json()["reason"] == "DeviceReuse"


def test_check_out_without_check_in_reports_not_ok():
    app, _ = make_app()
    client = app.test_client()
    login(client, 1)

    resp = client.post("/api/attendance/check-out", json={})

    assert resp.status_code == 200
    assert resp.get_json()["ok"] is False


def test_staff_cannot_use_admin_routes():
    app, _ = make_app()
    client = app.test_client()
    login(client, 1)

    assert client.get("/api/admin/dashboard").status_code == 403


def test_admin_grants_permission_and_lists_it():
    app, container = make_app()
    client = app.test_client()
    login(client, 9, role="admin")

    resp = client.post(
        "/api/admin/permissions/1",
        json={"type": "Official", "reason": "Audit", "start_date": "2099-03-03", "end_date": "2099-03-04"},
    )
    listed = client.get("/api/admin/permissions")

    assert resp.status_code == 200
    assert resp.get_json()["end_date"] == "2099-03-04T23:59:59"
    assert [row["staff_id"] for row in listed.get_json()] == [1]
    assert container.staff_repo.get_by_id(1).status.value == "On Official Duty"


def test_admin_permission_validation_and_not_found():
    app, _ = make_app()
    client = app.test_client()
    login(client, 9, role="admin")

    bad_type = client.post("/api/admin/permissions/1", json={"type": "Nap", "start_date": "2025-03-03", "end_date": "2025-03-04"})
    bad_date = client.post("/api/admin/permissions/1", json={"type": "Leave", "start_date": "03/03/2025", "end_date": "2025-03-04"})
    missing = client.post("/api/admin/permissions/77", json={"type": "Leave", "start_date": "2025-03-03", "end_date": "2025-03-04"})

    assert bad_type.status_code == 400
    assert bad_date.status_code == 400
    assert missing.status_code == 404


def test_admin_office_days_round_trip():
    app, _ = make_app()
    client = app.test_client()
    login(client, 9, role="admin")

    put = client.put("/api/admin/office-days", json={"days": ["Monday", "Wednesday"]})
    got = client.get("/api/admin/office-days")
    cleared = client.delete("/api/admin/office-days")

    assert put.status_code == 200
    assert got.get_json()["days"] == ["Monday", "Wednesday"]
    assert got.get_json()["active"] is True
    assert cleared.get_json()["active"] is False


def test_admin_schedules_dates_and_listing():
    app, _ = make_app()
    client = app.test_client()
    login(client, 9, role="admin")

    created = client.post(
        "/api/admin/schedules",
        json={"staff_ids": [1, 2], "start_date": "2025-03-01", "end_date": "2025-03-31", "dates": ["2025-03-04"]},
    )
    missing_mode = client.post(
        "/api/admin/schedules",
        json={"staff_ids": [1], "start_date": "2025-03-01", "end_date": "2025-03-31"},
    )
    listed = client.get("/api/admin/schedules?start=2025-03-01&end=2025-03-31&staff_id=2")

    assert created.status_code == 200
    assert len(created.get_json()["schedule_ids"]) == 2
    assert missing_mode.status_code == 400
    assert listed.get_json()[0]["assigned_dates"] == ["2025-03-04"]


def test_admin_deletes_staff():
    app, container = make_app()
    client = app.test_client()
    login(client, 9, role="admin")

    assert client.delete("/api/admin/staff/2").status_code == 200
    assert client.delete("/api/admin/staff/2").status_code == 404
    assert container.staff_repo.get_by_id(2) is None


def test_admin_lists_roster_ids():
    app, _ = make_app()
    client = app.test_client()
    login(client, 9, role="admin")

    resp = client.get("/api/admin/staff")

    assert resp.status_code == 200
    assert [(row["staff_id"], row["name"]) for row in resp.get_json()] == [(1, "Staff 1"), (2, "Staff 2"), (9, "Admin")]
