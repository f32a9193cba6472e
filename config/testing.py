import os

from config.defaults import OFFICE_RADIUS_METERS, OFFICES, ORG_UTC_OFFSET_HOURS  # noqa: F401

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
ENABLE_SCHEDULER = False

SMTP_HOST = ""
SMTP_PORT = 587
SMTP_USER = ""
SMTP_PASSWORD = ""
MAIL_FROM = "attendance@test.local"
ADMIN_EMAILS = ["admin@test.local"]
