from __future__ import annotations

from decimal import Decimal

import pytest

from hrpanel.core.config import (
    DEFAULT_MANAGER_POST_ID,
    DatabaseSettings,
    Settings,
)

_DB_VARS = ("DB_DRIVER", "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME")


def test_settings_use_default_configuration(monkeypatch) -> None:
    for name in (*_DB_VARS, "SQLALCHEMY_ECHO", "PAID_LEAVE_RATE", "PAID_LEAVE_AS_OF", "STAFF_ACCOUNTS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.database.driver == "mysql+pymysql"
    assert settings.database.host == "127.0.0.1"
    assert settings.database.port == 3306
    assert settings.database.user == "hrpanel"
    assert settings.database.name == "hrpanel"
    assert settings.sqlalchemy_echo is False
    assert settings.payroll.manager_post_id == DEFAULT_MANAGER_POST_ID
    assert settings.payroll.paid_leave_rate == Decimal("0.08")
    assert settings.payroll.paid_leave_as_of == "period"
    assert [account.username for account in settings.auth.staff_accounts] == ["reports"]
    assert settings.auth.staff_accounts[0].permissions == ("view_reports", "view_employees")


def test_sqlalchemy_url_for_mysql_and_sqlite() -> None:
    mysql = DatabaseSettings("mysql+pymysql", "db", 3306, "hr", "secret", "payroll")
    sqlite = DatabaseSettings("sqlite", "", 0, "", "", ":memory:")

    assert mysql.sqlalchemy_url == "mysql+pymysql://hr:secret@db:3306/payroll"
    assert sqlite.sqlalchemy_url == "sqlite:///:memory:"


def test_staff_accounts_are_parsed(monkeypatch) -> None:
    monkeypatch.setenv("STAFF_ACCOUNTS", "hr:manage_settings|view_reports, store:view_employees")

    accounts = Settings.from_env().auth.staff_accounts

    assert [(a.username, a.permissions) for a in accounts] == [
        ("hr", ("manage_settings", "view_reports")),
        ("store", ("view_employees",)),
    ]


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("STAFF_ACCOUNTS", "nobody"),
        ("STAFF_ACCOUNTS", "hr:fly_planes"),
        ("PAID_LEAVE_RATE", "eight"),
        ("PAID_LEAVE_RATE", "-0.1"),
        ("PAID_LEAVE_AS_OF", "yesterday"),
    ],
)
def test_malformed_values_raise(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        Settings.from_env()
