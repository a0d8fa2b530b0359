"""Shared fixtures: in-memory databases, seed helpers and a test client."""
from __future__ import annotations

import os

os.environ["LOG_DIR"] = ""
os.environ["AUTH_ENABLED"] = "0"
os.environ["DB_DRIVER"] = "sqlite"
os.environ["DB_NAME"] = ":memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hrpanel.core.config import (
    DEFAULT_ASSISTANT_MANAGER_POST_ID,
    DEFAULT_MANAGER_POST_ID,
    PayrollSettings,
)
from hrpanel.models import (
    Base,
    BonusTier,
    Employee,
    EmployeeEvaluation,
    EmployeeShop,
    ManagerDebt,
    MonthlySale,
    Post,
    Recommender,
    Shop,
    TotalRange,
)


class Seeder:
    """Small factory for the live tables the panel reads."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def posts(self) -> None:
        self.session.add_all(
            [
                Post(id=DEFAULT_MANAGER_POST_ID, title="Manager"),
                Post(id=DEFAULT_ASSISTANT_MANAGER_POST_ID, title="Assistant Manager"),
            ]
        )
        self.session.flush()

    def shop(self, name: str, location: str | None = None) -> Shop:
        shop = Shop(name=name, location=location)
        self.session.add(shop)
        self.session.flush()
        return shop

    def recommender(self, name: str) -> Recommender:
        recommender = Recommender(name=name)
        self.session.add(recommender)
        self.session.flush()
        return recommender

    def employee(
        self,
        name: str,
        *,
        post_id: str = DEFAULT_MANAGER_POST_ID,
        shop: Shop | None = None,
        recruitment_date: date | None = None,
        end_date: date | None = None,
        base_salary: str | None = None,
        recommender: Recommender | None = None,
    ) -> Employee:
        employee = Employee(
            full_name=name,
            post_id=post_id,
            recruitment_date=recruitment_date,
            end_of_service_date=end_date,
            base_salary=Decimal(base_salary) if base_salary is not None else None,
            recommended_by_id=recommender.id if recommender else None,
        )
        self.session.add(employee)
        self.session.flush()
        if shop is not None:
            self.session.add(EmployeeShop(employee_id=employee.id, shop_id=shop.id))
            self.session.flush()
        return employee

    def sale(self, shop: Shop, sales_month: date, amount: str) -> None:
        self.session.add(
            MonthlySale(shop_id=shop.id, sales_month=sales_month, sales_amount=Decimal(amount))
        )
        self.session.flush()

    def evaluation(
        self,
        employee: Employee,
        evaluation_month: date,
        score: str,
        bonus_amount: str | None = None,
    ) -> None:
        self.session.add(
            EmployeeEvaluation(
                employee_id=employee.id,
                evaluation_month=evaluation_month,
                total_score=Decimal(score),
                bonus_amount=Decimal(bonus_amount) if bonus_amount is not None else None,
            )
        )
        self.session.flush()

    def debt(self, employee: Employee, evaluation_month: date, **amounts: str) -> None:
        self.session.add(
            ManagerDebt(
                employee_id=employee.id,
                evaluation_month=evaluation_month,
                **{key: Decimal(value) for key, value in amounts.items()},
            )
        )
        self.session.flush()

    def bonus_tables(self) -> None:
        self.session.add_all(
            [
                BonusTier(min_sales=Decimal("0"), bonus_percent=Decimal("1")),
                BonusTier(min_sales=Decimal("1000"), bonus_percent=Decimal("2")),
                BonusTier(min_sales=Decimal("5000"), bonus_percent=Decimal("3")),
                TotalRange(min_value=Decimal("0"), max_value=Decimal("50"), amount=Decimal("10")),
                TotalRange(min_value=Decimal("51"), max_value=Decimal("100"), amount=Decimal("50")),
            ]
        )
        self.session.flush()


@pytest.fixture()
def engine():
    """In-memory SQLite shared across threads so the test client sees the same data."""

    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory) -> Session:
    """Provide an in-memory database session for each test."""

    with session_factory() as session:
        yield session


@pytest.fixture()
def seed(session: Session) -> Seeder:
    return Seeder(session)


@pytest.fixture()
def payroll_settings() -> PayrollSettings:
    return PayrollSettings()


@pytest.fixture()
def client(session_factory):
    from hrpanel.main import create_app
    from hrpanel.web.dependencies import get_db_session

    app = create_app()

    def _override_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _override_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
