"""Repository doubles and store helpers shared by the test modules."""

from __future__ import annotations

from habitvault.domain.store import AccountStore
from habitvault.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelCompletionRepository,
    SQLModelHabitRepository,
    SQLModelSettingsRepository,
    SQLModelStreakRepository,
)


def make_store(session_factory, **overrides) -> AccountStore:
    """Build an AccountStore over SQLite, replacing any repository by keyword."""

    repos = {
        "habits": SQLModelHabitRepository(session_factory),
        "completions": SQLModelCompletionRepository(session_factory),
        "streaks": SQLModelStreakRepository(session_factory),
        "categories": SQLModelCategoryRepository(session_factory),
        "settings": SQLModelSettingsRepository(session_factory),
    }
    repos.update(overrides)
    return AccountStore(**repos)


class FailingHabitRepository(SQLModelHabitRepository):
    """Raises on create for the listed habit names."""

    def __init__(self, session_factory, fail_names):
        super().__init__(session_factory)
        self.fail_names = set(fail_names)

    def create(self, habit, *, user_id):
        if habit.name in self.fail_names:
            raise RuntimeError(f"store rejected habit {habit.name}")
        return super().create(habit, user_id=user_id)


class FailingBatchCompletionRepository(SQLModelCompletionRepository):
    """Raises on the listed create_many calls (1-based)."""

    def __init__(self, session_factory, fail_calls):
        super().__init__(session_factory)
        self.fail_calls = set(fail_calls)
        self.calls = 0
        self.batch_sizes: list[int] = []

    def create_many(self, completions, *, user_id):
        self.calls += 1
        self.batch_sizes.append(len(completions))
        if self.calls in self.fail_calls:
            raise RuntimeError("batch insert rejected")
        return super().create_many(completions, user_id=user_id)


class FailingReadHabitRepository(SQLModelHabitRepository):
    def list_all(self, *, user_id, include_inactive=True):
        raise RuntimeError("network unreachable")


class BrokenSettingsRepository(SQLModelSettingsRepository):
    def put(self, user_id, blob):
        raise OSError("local storage is full")


class CountingRepositoryMixin:
    """Records every write call made through the repository."""

    writes: list[str]

    def _note(self, name):
        if not hasattr(self, "writes"):
            self.writes = []
        self.writes.append(name)


class SpyHabitRepository(CountingRepositoryMixin, SQLModelHabitRepository):
    def create(self, habit, *, user_id):
        self._note("habits.create")
        return super().create(habit, user_id=user_id)


class SpyCompletionRepository(CountingRepositoryMixin, SQLModelCompletionRepository):
    def create_many(self, completions, *, user_id):
        self._note("completions.create_many")
        return super().create_many(completions, user_id=user_id)


class SpyStreakRepository(CountingRepositoryMixin, SQLModelStreakRepository):
    def upsert(self, streak, *, user_id):
        self._note("streaks.upsert")
        return super().upsert(streak, user_id=user_id)


class SpyCategoryRepository(CountingRepositoryMixin, SQLModelCategoryRepository):
    def create(self, category, *, user_id):
        self._note("categories.create")
        return super().create(category, user_id=user_id)


class SpySettingsRepository(CountingRepositoryMixin, SQLModelSettingsRepository):
    def put(self, user_id, blob):
        self._note("settings.put")
        return super().put(user_id, blob)


def spy_store(session_factory) -> AccountStore:
    return make_store(
        session_factory,
        habits=SpyHabitRepository(session_factory),
        completions=SpyCompletionRepository(session_factory),
        streaks=SpyStreakRepository(session_factory),
        categories=SpyCategoryRepository(session_factory),
        settings=SpySettingsRepository(session_factory),
    )


def write_calls(store: AccountStore) -> list[str]:
    calls: list[str] = []
    for repo in (store.habits, store.completions, store.streaks, store.categories, store.settings):
        calls.extend(getattr(repo, "writes", []))
    return calls
