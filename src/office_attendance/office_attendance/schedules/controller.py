from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, date_arg, handle_errors, json_body
from ..container import Container
from ..core.exceptions import ValidationError


def _policy_dict(policy) -> dict:
    if policy is None:
        return {"days": [], "version": None, "active": False}
    return {
        "days": list(policy.days),
        "version": policy.version,
        "week_start": policy.week_start.isoformat() if policy.week_start else None,
        "active": True,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/schedules", methods=["POST"], endpoint="admin_assign_schedule")
    @admin_required
    @handle_errors("scheduling")
    def assign_schedule():
        data = json_body()
        staff_ids = data.get("staff_ids") or []
        if not isinstance(staff_ids, list):
            raise ValidationError("staff_ids must be a list")
        start = date_arg(data.get("start_date"), "start_date")
        end = date_arg(data.get("end_date"), "end_date")

        if data.get("dates"):
            ids = container.schedule_service.assign_dates(
                staff_ids=staff_ids,
                start=start,
                end=end,
                dates=[date_arg(d, "dates") for d in data["dates"]],
            )
        elif data.get("days_per_week") is not None:
            ids = container.schedule_service.assign_days_per_week(
                staff_ids=staff_ids,
                start=start,
                end=end,
                days_per_week=data["days_per_week"],
            )
        else:
            raise ValidationError("Either dates or days_per_week is required")

        return jsonify({"message": "Schedule saved", "schedule_ids": ids})

    @app.route("/api/admin/schedules", methods=["GET"], endpoint="admin_schedules")
    @admin_required
    @handle_errors("listing schedules")
    def list_schedules():
        start = date_arg(request.args.get("start"), "start")
        end = date_arg(request.args.get("end"), "end")
        staff_id = request.args.get("staff_id", type=int)
        rows = container.schedule_service.list_range(start=start, end=end, staff_id=staff_id)
        return jsonify(
            [
                {
                    "schedule_id": sc.schedule_id,
                    "staff_id": sc.staff_id,
                    "start_date": sc.start_date.isoformat(),
                    "end_date": sc.end_date.isoformat(),
                    "days_per_week": sc.days_per_week,
                    "assigned_dates": [d.isoformat() for d in sc.assigned_dates],
                }
                for sc in rows
            ]
        )

    @app.route("/api/admin/office-days", methods=["GET"], endpoint="admin_office_days")
    @admin_required
    @handle_errors("office days")
    def get_office_days():
        return jsonify(_policy_dict(container.schedule_service.get_office_days()))

    @app.route("/api/admin/office-days", methods=["PUT"], endpoint="admin_set_office_days")
    @admin_required
    @handle_errors("office days")
    def set_office_days():
        data = json_body()
        week_start = date_arg(data["week_start"], "week_start") if data.get("week_start") else None
        policy = container.schedule_service.set_office_days(days=data.get("days") or [], week_start=week_start)
        return jsonify(_policy_dict(policy))

    @app.route("/api/admin/office-days", methods=["DELETE"], endpoint="admin_clear_office_days")
    @admin_required
    @handle_errors("office days")
    def clear_office_days():
        container.schedule_service.clear_office_days()
        return jsonify(_policy_dict(None))
