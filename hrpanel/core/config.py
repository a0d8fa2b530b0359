"""Environment driven configuration for the HR panel."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Post identifiers seeded in the shop roster.
DEFAULT_MANAGER_POST_ID = "04b5ce3e-1aaf-11f0-99a1-cc28aa53b74d"
DEFAULT_ASSISTANT_MANAGER_POST_ID = "cf0ca194-1abc-11f0-99a1-cc28aa53b74d"

ALL_PERMISSIONS: tuple[str, ...] = (
    "manage_settings",
    "manage_bonus_configuration",
    "view_reports",
    "view_employees",
)

_FALSY = {"0", "false", "False", "no", "off"}


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the HR database."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.driver.startswith("sqlite"):
            return f"{self.driver}:///{self.name}"
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class StaffAccount:
    """Configured login with an explicit permission set."""

    username: str
    permissions: tuple[str, ...]


@dataclass(slots=True)
class AuthSettings:
    """Authentication settings loaded from environment variables."""

    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    admin_username: str
    admin_password: str
    staff_password: str
    staff_accounts: tuple[StaffAccount, ...]
    cookie_name: str = "access_token"
    flash_cookie_name: str = "flash"
    enabled: bool = True


@dataclass(slots=True)
class PayrollSettings:
    """Business constants used by the payroll engine and snapshots."""

    manager_post_id: str = DEFAULT_MANAGER_POST_ID
    assistant_manager_post_id: str = DEFAULT_ASSISTANT_MANAGER_POST_ID
    paid_leave_rate: Decimal = Decimal("0.08")
    # "period" measures paid-leave tenure at the reported month, "today" at the run date.
    paid_leave_as_of: str = "period"


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    payroll: PayrollSettings
    log_level: str = "INFO"
    log_dir: str = "logs"
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _parse_accounts(value: str) -> Tuple[StaffAccount, ...]:
            accounts: list[StaffAccount] = []
            for item in value.split(","):
                item = item.strip()
                if not item:
                    continue
                if ":" not in item:
                    raise ValueError(
                        "Account definitions must follow '<username>:<perm>|<perm>' format."
                    )
                username, raw_permissions = item.split(":", 1)
                username = username.strip()
                permissions = tuple(
                    perm.strip() for perm in raw_permissions.split("|") if perm.strip()
                )
                if not username:
                    raise ValueError("Invalid account definition: username required.")
                unknown = [perm for perm in permissions if perm not in ALL_PERMISSIONS]
                if unknown:
                    raise ValueError(f"Unknown permissions for {username}: {', '.join(unknown)}")
                accounts.append(StaffAccount(username=username, permissions=permissions))
            return tuple(accounts)

        def _parse_rate(value: str) -> Decimal:
            try:
                rate = Decimal(value)
            except InvalidOperation as exc:
                raise ValueError(f"PAID_LEAVE_RATE must be a decimal, got {value!r}") from exc
            if rate < 0:
                raise ValueError("PAID_LEAVE_RATE cannot be negative.")
            return rate

        paid_leave_as_of = _get_env("PAID_LEAVE_AS_OF", "period").strip().lower()
        if paid_leave_as_of not in {"period", "today"}:
            raise ValueError("PAID_LEAVE_AS_OF must be 'period' or 'today'.")

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "hrpanel"),
            password=_get_env("DB_PASSWORD", "hrpanel"),
            name=_get_env("DB_NAME", "hrpanel"),
        )
        auth = AuthSettings(
            secret_key=_get_env("JWT_SECRET_KEY", "change-me"),
            algorithm=_get_env("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(_get_env("JWT_EXPIRE_MINUTES", "120")),
            admin_username=_get_env("ADMIN_USERNAME", "admin"),
            admin_password=_get_env("ADMIN_PASSWORD", "adminpass"),
            staff_password=_get_env("STAFF_PASSWORD", "staff"),
            staff_accounts=_parse_accounts(
                _get_env("STAFF_ACCOUNTS", "reports:view_reports|view_employees")
            ),
            enabled=_get_env("AUTH_ENABLED", "1") not in _FALSY,
        )
        payroll = PayrollSettings(
            manager_post_id=_get_env("MANAGER_POST_ID", DEFAULT_MANAGER_POST_ID),
            assistant_manager_post_id=_get_env(
                "ASSISTANT_MANAGER_POST_ID", DEFAULT_ASSISTANT_MANAGER_POST_ID
            ),
            paid_leave_rate=_parse_rate(_get_env("PAID_LEAVE_RATE", "0.08")),
            paid_leave_as_of=paid_leave_as_of,
        )
        return cls(
            database=db,
            auth=auth,
            payroll=payroll,
            log_level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=_get_env("LOG_DIR", "logs"),
            sqlalchemy_echo=_get_env("SQLALCHEMY_ECHO", "0") not in _FALSY,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .logger import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
            },
            "auth": {
                "admin_username": settings.auth.admin_username,
                "staff_accounts": [account.username for account in settings.auth.staff_accounts],
                "token_ttl": settings.auth.access_token_expire_minutes,
                "enabled": settings.auth.enabled,
            },
            "payroll": {
                "manager_post_id": settings.payroll.manager_post_id,
                "assistant_manager_post_id": settings.payroll.assistant_manager_post_id,
                "paid_leave_as_of": settings.payroll.paid_leave_as_of,
            },
        },
    )
    return settings
