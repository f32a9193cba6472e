from __future__ import annotations

from html import escape

WARNING_SUBJECT = "Attendance Warning"
QUERY_SUBJECT = "Official Query: Excessive Absences"


def warning_email_html(name: str, absences: int) -> str:
    return f"""
  <h3>Hello {escape(name)},</h3>
  <p>You have been absent <strong>{absences} times</strong> this month.</p>
  <p>Please improve your punctuality and attendance.</p>
"""


def query_email_html(name: str, absences: int) -> str:
    return f"""
  <h3>Hello {escape(name)},</h3>
  <p>You have been absent <strong>{absences} times</strong> this month.</p>
  <p>This is an official query. Contact HR immediately.</p>
"""
