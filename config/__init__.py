import os


def get_settings_module() -> str:
    # APP_ENV chọn module cấu hình, mặc định là 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def leave_grants_from_env(defaults: dict) -> dict:
    """Entitlement per leave type, overridable via LEAVE_GRANT_<TYPE>."""
    return {
        leave_type: float(os.getenv(f"LEAVE_GRANT_{leave_type.upper()}", str(days)))
        for leave_type, days in defaults.items()
    }
