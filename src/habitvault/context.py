"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from sqlmodel import Session

from .config import BaseConfig
from .domain.repositories import UserRepository
from .domain.store import AccountStore
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelCompletionRepository,
    SQLModelHabitRepository,
    SQLModelSettingsRepository,
    SQLModelStreakRepository,
    SQLModelUserRepository,
)
from .models.user import User
from .services.backup import BackupService


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    session_factory: Callable[[], ContextManager[Session]]

    user_repo: UserRepository
    store: AccountStore
    backup_service: BackupService

    current_user: Optional[User] = None


def create_store(session_factory: Callable[[], ContextManager[Session]]) -> AccountStore:
    return AccountStore(
        habits=SQLModelHabitRepository(session_factory),
        completions=SQLModelCompletionRepository(session_factory),
        streaks=SQLModelStreakRepository(session_factory),
        categories=SQLModelCategoryRepository(session_factory),
        settings=SQLModelSettingsRepository(session_factory),
    )


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, schema and repositories for one process."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)
    store = create_store(session_factory)

    return AppContext(
        config=config,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        store=store,
        backup_service=BackupService(store, config=config),
    )
