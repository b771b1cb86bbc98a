"""Shared fixtures: in-memory SQLite store patched into coachbook.db.session, plus factories."""
from __future__ import annotations

import itertools
from datetime import date
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import coachbook.models  # noqa: F401  (populates Base.metadata)
from coachbook.core import config
from coachbook.db import session as db_session
from coachbook.db.session import Base, get_db
from coachbook.models import Coach, PackagePurchase, PurchaseStatus, User

FAR_FUTURE = date(2099, 12, 31)
_counter = itertools.count()


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    test_settings = config.Settings(
        database_url="sqlite+pysqlite:///:memory:",
        isolation_level="",
        webhook_url=None,
        admin_roles="admin",
        transaction_retries=1,
    )
    monkeypatch.setattr(config, "_settings", test_settings)
    return test_settings


@pytest.fixture(autouse=True)
def engine(monkeypatch):
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    monkeypatch.setattr(db_session, "_engine", engine)
    monkeypatch.setattr(db_session, "_SessionLocal", factory)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def make_user():
    def _make(role: str = "user", display_name: Optional[str] = None) -> str:
        n = next(_counter)
        with get_db() as db:
            user = User(email=f"user{n}@example.com", display_name=display_name or f"User {n}", role=role)
            db.add(user)
            db.flush()
            return user.id

    return _make


@pytest.fixture
def make_coach(make_user):
    def _make(
        availability: Optional[dict] = None,
        is_active: bool = True,
        display_name: Optional[str] = None,
    ) -> Coach:
        user_id = make_user(role="coach")
        with get_db() as db:
            coach = Coach(
                user_id=user_id,
                display_name=display_name or f"Coach {user_id[:8]}",
                is_active=is_active,
                availability=availability or {},
            )
            db.add(coach)
            db.flush()
            return coach

    return _make


@pytest.fixture
def make_purchase():
    def _make(
        client_id: str,
        total: int = 5,
        remaining: Optional[int] = None,
        status: str = PurchaseStatus.ACTIVE.value,
        expiry_date: date = FAR_FUTURE,
    ) -> str:
        with get_db() as db:
            purchase = PackagePurchase(
                user_id=client_id,
                package_name="Starter pack",
                total_sessions=total,
                sessions_remaining=total if remaining is None else remaining,
                expiry_date=expiry_date,
                status=status,
            )
            db.add(purchase)
            db.flush()
            return purchase.id

    return _make


@pytest.fixture
def client_id(make_user):
    return make_user()


@pytest.fixture
def coach(make_coach):
    return make_coach()
