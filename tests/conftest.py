from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from main import app
from app.api.deps import (
    get_group_repository,
    get_ledger_repository,
    get_person_repository,
)
from app.core.auth import get_current_user, get_user_repository
from app.core.security import hash_password
from app.models.group import TravelGroup
from app.models.ledger import LedgerEntry, LedgerStatus
from app.models.person import PersonProfile
from app.models.user import UserCreate, UserInDB


# ===== IN-MEMORY REPOSITORIES =====
# Same async interface as the motor repositories in app/repositories.

class Counters:
    def __init__(self):
        self.values: Dict[str, int] = {}

    def reserve(self, name: str, count: int = 1) -> int:
        current = self.values.get(name, 0)
        self.values[name] = current + count
        return current + 1


class FakeUserRepository:
    def __init__(self):
        self.users: Dict[str, UserInDB] = {}

    def add(self, name: str, email: str, currency_preference: str = "USD") -> UserInDB:
        now = datetime.now(timezone.utc)
        user = UserInDB(
            _id=ObjectId(),
            name=name,
            email=email,
            password_hash="not-a-real-hash",
            currency_preference=currency_preference,
            created_at=now,
            updated_at=now
        )
        self.users[str(user.id)] = user
        return user

    async def create_user(self, user_data: UserCreate) -> UserInDB:
        user = self.add(user_data.name, user_data.email, user_data.currency_preference)
        user = user.model_copy(update={"password_hash": hash_password(user_data.password)})
        self.users[str(user.id)] = user
        return user

    async def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def get_user_by_id(self, user_id: str) -> Optional[UserInDB]:
        return self.users.get(user_id)

    async def update_user(self, user_id: str, update_data: dict) -> Optional[UserInDB]:
        user = self.users.get(user_id)
        if user is None:
            return None
        user = user.model_copy(update=update_data)
        self.users[user_id] = user
        return user


class FakePersonRepository:
    def __init__(self, counters: Counters):
        self.counters = counters
        self.people: Dict[int, PersonProfile] = {}

    async def create_person(self, owner_id, name, linked_user_id=None) -> PersonProfile:
        person = PersonProfile(
            id=self.counters.reserve("people"),
            owner_id=owner_id,
            name=name,
            linked_user_id=linked_user_id
        )
        self.people[person.id] = person
        return person

    async def get_person(self, person_id, owner_id) -> Optional[PersonProfile]:
        person = self.people.get(person_id)
        if person and person.owner_id == owner_id and not person.is_deleted:
            return person
        return None

    async def find_linked_person(self, owner_id, linked_user_id) -> Optional[PersonProfile]:
        for person in self.people.values():
            if (person.owner_id == owner_id and person.linked_user_id == linked_user_id
                    and not person.is_deleted):
                return person
        return None

    async def list_people(self, owner_id) -> List[PersonProfile]:
        return [
            p for p in sorted(self.people.values(), key=lambda p: p.id)
            if p.owner_id == owner_id and not p.is_deleted
        ]

    async def update_person(self, person_id, owner_id, updates) -> Optional[PersonProfile]:
        person = await self.get_person(person_id, owner_id)
        if person is None:
            return None
        person = person.model_copy(update=updates)
        self.people[person_id] = person
        return person

    async def soft_delete_person(self, person_id, owner_id) -> bool:
        return await self.update_person(person_id, owner_id, {"is_deleted": True}) is not None


class FakeLedgerRepository:
    def __init__(self, counters: Counters):
        self.counters = counters
        self.entries: Dict[int, LedgerEntry] = {}

    async def allocate_ids(self, count: int = 1) -> List[int]:
        first = self.counters.reserve("ledger_entries", count)
        return list(range(first, first + count))

    async def insert_entries(self, entries):
        for entry in entries:
            assert entry.id not in self.entries
            self.entries[entry.id] = entry
        return entries

    async def get_entry(self, entry_id) -> Optional[LedgerEntry]:
        return self.entries.get(entry_id)

    async def list_for_person(self, person_id):
        return sorted(
            (e for e in self.entries.values() if e.person_id == person_id),
            key=lambda e: (e.date, e.id)
        )

    async def list_for_people(self, person_ids):
        ids = set(person_ids)
        return sorted(
            (e for e in self.entries.values() if e.person_id in ids),
            key=lambda e: (e.date, e.id)
        )

    async def list_awaiting_decision(self, user_id):
        return [
            e for e in sorted(self.entries.values(), key=lambda e: e.id)
            if e.owner_id == user_id and e.status == LedgerStatus.PENDING
            and e.created_by != user_id
        ]

    async def transition_status(self, entry_ids, current, target) -> int:
        moved = 0
        for entry_id in entry_ids:
            entry = self.entries.get(entry_id)
            if entry is not None and entry.status == current:
                self.entries[entry_id] = entry.model_copy(update={"status": target})
                moved += 1
        return moved


class FakeGroupRepository:
    def __init__(self, counters: Counters):
        self.counters = counters
        self.groups: Dict[int, TravelGroup] = {}

    async def create_group(self, owner_id, name, description="", currency="USD") -> TravelGroup:
        group = TravelGroup(
            id=self.counters.reserve("groups"),
            owner_id=owner_id,
            name=name,
            description=description,
            currency=currency
        )
        self.groups[group.id] = group
        return group

    async def get_group(self, group_id, owner_id) -> Optional[TravelGroup]:
        group = self.groups.get(group_id)
        if group and group.owner_id == owner_id and not group.is_deleted:
            # Hand out a copy, like a fresh read from the database
            return group.model_copy(deep=True)
        return None

    async def list_groups(self, owner_id):
        return [
            g for g in self.groups.values()
            if g.owner_id == owner_id and not g.is_deleted
        ]

    async def save_group(self, group):
        self.groups[group.id] = group.model_copy(deep=True)
        return group

    async def soft_delete_group(self, group_id, owner_id) -> bool:
        group = await self.get_group(group_id, owner_id)
        if group is None:
            return False
        self.groups[group_id] = group.model_copy(update={"is_deleted": True})
        return True


# ===== FIXTURES =====

@pytest.fixture
def counters():
    return Counters()


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def person_repo(counters):
    return FakePersonRepository(counters)


@pytest.fixture
def ledger_repo(counters):
    return FakeLedgerRepository(counters)


@pytest.fixture
def group_repo(counters):
    return FakeGroupRepository(counters)


@pytest.fixture
def alice(user_repo):
    return user_repo.add("Alice", "alice@example.com").to_response()


@pytest.fixture
def bob(user_repo):
    return user_repo.add("Bob", "bob@example.com", currency_preference="EUR").to_response()


@pytest.fixture
def mock_db():
    """Motor database double: every collection method is an AsyncMock."""
    db = MagicMock()
    for name in ("users", "people", "ledger_entries", "groups", "counters"):
        collection = MagicMock()
        collection.insert_one = AsyncMock()
        collection.insert_many = AsyncMock()
        collection.find_one = AsyncMock()
        collection.find_one_and_update = AsyncMock()
        collection.update_one = AsyncMock()
        collection.update_many = AsyncMock()
        collection.replace_one = AsyncMock()
        setattr(db, name, collection)
    db.__getitem__.side_effect = lambda name: getattr(db, name)
    return db


class CallerSwitch:
    """Which user the overridden auth dependency returns."""

    def __init__(self, user):
        self.user = user


@pytest.fixture
def caller(alice):
    return CallerSwitch(alice)


@pytest.fixture
def test_client(caller, user_repo, person_repo, ledger_repo, group_repo):
    """FastAPI test client wired to the in-memory repositories."""
    app.dependency_overrides[get_current_user] = lambda: caller.user
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_person_repository] = lambda: person_repo
    app.dependency_overrides[get_ledger_repository] = lambda: ledger_repo
    app.dependency_overrides[get_group_repository] = lambda: group_repo

    # No context manager: the lifespan would open a MongoDB connection
    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
