from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import WeekWindow
from ..common.web import current_staff_id, date_arg, handle_errors, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="checkin")
    @login_required
    @handle_errors("check-in")
    def checkin():
        data = json_body()
        result = container.attendance_service.check_in(
            current_staff_id(),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            device_id=data.get("device_id") or "",
        )
        return jsonify({"message": "Welcome. Kindly audit with conscience today.", **result.to_dict()})

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="checkout")
    @login_required
    @handle_errors("check-out")
    def checkout():
        data = json_body()
        result = container.attendance_service.check_out(
            current_staff_id(),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return jsonify({"ok": result.ok, "message": result.message})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    @handle_errors("attendance summary")
    def summary():
        return jsonify(container.attendance_service.summary(current_staff_id()))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    @handle_errors("attendance history")
    def history():
        limit = request.args.get("limit", type=int) or 30
        return jsonify(container.attendance_service.history(current_staff_id(), limit=limit))

    @app.route("/api/attendance/compliance", methods=["GET"], endpoint="attendance_compliance")
    @login_required
    @handle_errors("compliance check")
    def compliance():
        window = None
        if request.args.get("week_start"):
            window = WeekWindow.containing(date_arg(request.args["week_start"], "week_start"))
        result = container.attendance_service.is_compliant(current_staff_id(), window=window)
        return jsonify(result.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    @handle_errors("schedule lookup")
    def today():
        return jsonify({"scheduled": container.attendance_service.is_scheduled_today(current_staff_id())})
