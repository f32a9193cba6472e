"""Office Attendance package.

Feature modules (geo, staff, schedules, attendance, compliance, jobs) sit on top
of service/repository layers, with thin Flask controllers and scheduled jobs as
the only entry points.
"""
