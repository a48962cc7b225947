import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default=None):
    """Environment variables win over env.yaml values."""
    if key in os.environ:
        return yaml.safe_load(os.environ[key])
    return data.get(key, default)


def _get_str(key, default=None):
    value = _get(key, default)
    return None if value is None else str(value)


class ConfigurationError(Exception):
    pass


class ApplicationConfig:
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./authtrail.db")
    AUTO_CREATE_TABLES = bool(_get("AUTO_CREATE_TABLES", True))
    API_PREFIX = _get("API_PREFIX", "")
    API_PORT = int(_get("API_PORT", 8000))
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = bool(_get("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    ENVIRONMENT = _get("ENVIRONMENT", "development")
    FRONTEND_URL = _get_str("FRONTEND_URL", "http://localhost:3000")

    # Secrets have no default: the app refuses to start without them
    JWT_SECRET = _get_str("JWT_SECRET")
    REFRESH_TOKEN_SECRET = _get_str("REFRESH_TOKEN_SECRET")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(_get("ACCESS_TOKEN_EXPIRE_MINUTES", 30 * 24 * 60))
    REFRESH_TOKEN_EXPIRE_DAYS = int(_get("REFRESH_TOKEN_EXPIRE_DAYS", 7))
    REFRESH_COOKIE_EXPIRE_DAYS = int(_get("REFRESH_COOKIE_EXPIRE_DAYS", 30))
    AUTH_COOKIE_PATH = _get_str("AUTH_COOKIE_PATH", "/auth")

    MAX_FAILED_LOGIN_ATTEMPTS = int(_get("MAX_FAILED_LOGIN_ATTEMPTS", 5))
    ACCOUNT_LOCK_MINUTES = int(_get("ACCOUNT_LOCK_MINUTES", 15))
    VERIFICATION_TOKEN_HOURS = int(_get("VERIFICATION_TOKEN_HOURS", 24))

    AUDIT_MAX_QUERY_DAYS = int(_get("AUDIT_MAX_QUERY_DAYS", 365))
    AUDIT_EXPORT_MAX_ROWS = int(_get("AUDIT_EXPORT_MAX_ROWS", 10000))

    @classmethod
    def is_production(cls) -> bool:
        return str(cls.ENVIRONMENT).lower() == "production"

    @classmethod
    def validate(cls) -> None:
        """
        Check settings that have no safe default.

        Raises:
            ConfigurationError: if a token secret is missing or both secrets are equal
        """
        missing = [
            name
            for name in ("JWT_SECRET", "REFRESH_TOKEN_SECRET")
            if not getattr(cls, name, None)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
        if cls.JWT_SECRET == cls.REFRESH_TOKEN_SECRET:
            raise ConfigurationError(
                "JWT_SECRET and REFRESH_TOKEN_SECRET must be different"
            )
        if cls.MAX_FAILED_LOGIN_ATTEMPTS < 1 or cls.ACCOUNT_LOCK_MINUTES < 1:
            raise ConfigurationError(
                "MAX_FAILED_LOGIN_ATTEMPTS and ACCOUNT_LOCK_MINUTES must be positive"
            )
