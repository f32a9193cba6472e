from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_staff_id, date_or_datetime_arg, handle_errors, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/permissions/<int:staff_id>", methods=["POST"], endpoint="admin_grant_permission")
    @admin_required
    @handle_errors("granting permission")
    def grant_permission(staff_id: int):
        data = json_body()
        permission = container.permission_gate.grant(
            staff_id=staff_id,
            permission_type=data.get("type") or "",
            reason=data.get("reason"),
            start=date_or_datetime_arg(data.get("start_date"), "start_date"),
            end=date_or_datetime_arg(data.get("end_date"), "end_date"),
        )
        return jsonify(
            {
                "message": "Permission granted successfully",
                "type": permission.permission_type.value,
                "start_date": permission.start_date.isoformat(),
                "end_date": permission.end_date.isoformat(),
            }
        )

    @app.route("/api/admin/permissions", methods=["GET"], endpoint="admin_permissions")
    @admin_required
    @handle_errors("listing permissions")
    def permissions():
        return jsonify(container.staff_service.list_permissions())

    @app.route("/api/admin/staff", methods=["GET"], endpoint="admin_staff_list")
    @admin_required
    @handle_errors("listing staff")
    def staff_list():
        return jsonify(container.staff_service.list_staff())

    @app.route("/api/admin/staff/<int:staff_id>", methods=["DELETE"], endpoint="admin_delete_staff")
    @admin_required
    @handle_errors("deleting staff")
    def delete_staff(staff_id: int):
        container.staff_service.delete_staff(staff_id)
        return jsonify({"message": "Staff deleted"})

    @app.route("/api/admin/staff/<int:staff_id>/attendance", methods=["GET"], endpoint="admin_staff_attendance")
    @admin_required
    @handle_errors("staff attendance")
    def staff_attendance(staff_id: int):
        container.staff_service.get(staff_id)
        limit = request.args.get("limit", type=int) or 100
        return jsonify(container.attendance_service.history(staff_id, limit=limit))

    @app.route("/api/admin/attendance/<int:attendance_id>/override", methods=["POST"], endpoint="admin_override")
    @admin_required
    @handle_errors("attendance override")
    def override(attendance_id: int):
        data = json_body()
        record = container.attendance_service.override_status(
            attendance_id=attendance_id,
            admin_id=current_staff_id(),
            status=data.get("status") or "",
            reason=data.get("reason") or "",
        )
        return jsonify(record.to_dict())

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    @handle_errors("dashboard")
    def dashboard():
        return jsonify(container.report_service.dashboard())

    @app.route("/api/admin/present-today", methods=["GET"], endpoint="admin_present_today")
    @admin_required
    @handle_errors("present today")
    def present_today():
        return jsonify(container.report_service.present_today())

    @app.route("/api/admin/sweeps/end-of-day", methods=["POST"], endpoint="admin_run_end_of_day")
    @admin_required
    @handle_errors("end-of-day sweep")
    def run_end_of_day():
        report = container.end_of_day_sweeper.run()
        return jsonify(
            {
                "work_date": report.work_date,
                "skipped_before_close": report.skipped_before_close,
                "expired_permissions": report.expired_permissions,
                "absent_created": report.absent_created,
                "permission_created": report.permission_created,
                "reclassified": report.reclassified,
                "failures": report.failures,
            }
        )

    @app.route("/api/admin/sweeps/compliance", methods=["POST"], endpoint="admin_run_compliance")
    @admin_required
    @handle_errors("compliance sweep")
    def run_compliance():
        report = container.compliance.run()
        return jsonify(
            {
                "month": report.month,
                "checked": report.checked,
                "warnings_sent": report.warnings_sent,
                "queries_sent": report.queries_sent,
                "failures": report.failures,
            }
        )
