import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_db_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

LEAVE_GRANTS = {"casual": 12.0, "sick": 10.0, "paid": 15.0}
PAYROLL_DAILY_DIVISOR = 30
PAYSLIP_DIR = os.getenv("PAYSLIP_DIR", "/tmp/hr-system-payslips")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
