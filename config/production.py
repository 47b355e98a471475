import os

from config import leave_grants_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LEAVE_GRANTS = leave_grants_from_env({"casual": 12, "sick": 10, "paid": 15})
PAYROLL_DAILY_DIVISOR = int(os.getenv("PAYROLL_DAILY_DIVISOR", "30"))
PAYSLIP_DIR = os.getenv("PAYSLIP_DIR", "/var/lib/hr-system/payslips")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
