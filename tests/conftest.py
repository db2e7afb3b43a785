"""Pytest configuration and shared fixtures for HabitVault tests.

Provides an isolated SQLite database per test, account fixtures, factories for
habits and their related rows. Repository doubles that fail on demand live in
``doubles.py``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest
from sqlmodel import SQLModel, create_engine

from doubles import make_store
from habitvault.domain.store import AccountStore
from habitvault.infra.database import session_scope
from habitvault.infra.repositories import SQLModelUserRepository
from habitvault.logging_config import ROOT_LOGGER_NAME
from habitvault.models import Category, Completion, Habit, Streak, User


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging so tests don't share streams."""

    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create an isolated SQLite database file for each test."""

    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Factory returning transactional session scopes, as the repositories expect."""

    def factory():
        return session_scope(db_engine)

    return factory


@pytest.fixture
def user_repo(session_factory) -> SQLModelUserRepository:
    return SQLModelUserRepository(session_factory)


@pytest.fixture
def user(user_repo) -> User:
    """Account that owns the seeded data."""

    return user_repo.create(
        User(
            email="tester@example.com",
            display_name="Tester",
            timezone="Europe/Berlin",
            reminder_enabled=True,
            reminder_time="08:30",
        )
    )


@pytest.fixture
def other_user(user_repo) -> User:
    """Empty account used as an import target."""

    return user_repo.create(User(email="fresh@example.com"))


@pytest.fixture
def store(session_factory) -> AccountStore:
    return make_store(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(store, user):
    def _create_habit(
        name: str = "Exercise",
        *,
        owner: Optional[User] = None,
        category: Optional[str] = "Fitness",
        category_id: Optional[str] = None,
        description: Optional[str] = None,
        is_active: bool = True,
    ) -> Habit:
        owner = owner or user
        return store.habits.create(
            Habit(
                name=name,
                description=description,
                category=category,
                category_id=category_id,
                frequency="daily",
                target_days=[1, 3, 5],
                reminder_time="07:00",
                color="#10B981",
                icon="dumbbell",
                is_active=is_active,
                created_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            ),
            user_id=owner.id,
        )

    return _create_habit


@pytest.fixture
def completion_factory(store, user):
    def _create_completions(
        habit: Habit,
        days: int,
        *,
        start: date = date(2024, 3, 1),
        owner: Optional[User] = None,
        notes: Optional[str] = None,
    ) -> list[Completion]:
        owner = owner or user
        rows = [
            Completion(habit_id=habit.id, completed_date=start + timedelta(days=i), notes=notes)
            for i in range(days)
        ]
        return store.completions.create_many(rows, user_id=owner.id)

    return _create_completions


@pytest.fixture
def streak_factory(store, user):
    def _create_streak(habit: Habit, current: int, longest: int, last: Optional[date] = None) -> Streak:
        return store.streaks.upsert(
            Streak(
                habit_id=habit.id,
                current_streak=current,
                longest_streak=longest,
                last_completed_date=last,
            ),
            user_id=user.id,
        )

    return _create_streak


@pytest.fixture
def seeded_account(store, user, habit_factory, completion_factory, streak_factory):
    """Account with 3 habits, 12 completions, 2 streaks, 1 category, reminders."""

    category = store.categories.create(
        Category(name="Fitness", color="#F59E0B", icon="dumbbell"), user_id=user.id
    )
    run = habit_factory("Run", category_id=category.id)
    read = habit_factory("Read", category="Learning")
    meditate = habit_factory("Meditate", category="Health", is_active=False)

    completion_factory(run, 5)
    completion_factory(read, 5, notes="chapter")
    completion_factory(meditate, 2)

    streak_factory(run, 5, 9, date(2024, 3, 5))
    streak_factory(read, 5, 5, date(2024, 3, 5))

    store.settings.put(
        user.id,
        {
            "habitReminders": [
                {"habitId": run.id, "time": "07:00", "enabled": True},
                {"habitId": read.id, "time": "21:00", "enabled": False},
            ],
            "theme": "dark",
            "language": "de",
        },
    )
    return {"category": category, "run": run, "read": read, "meditate": meditate}

