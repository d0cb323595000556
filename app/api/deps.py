"""Repository and service providers for route handlers. Tests override the repository providers."""
from fastapi import Depends

from app.core.auth import get_user_repository
from app.db.mongo import get_db
from app.repositories.group_repo import GroupRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.person_repo import PersonRepository
from app.repositories.user_repo import UserRepository
from app.services.group_service import GroupService
from app.services.ledger_service import LedgerService
from app.services.person_service import PersonService
from app.services.user_service import UserService


def get_person_repository(db = Depends(get_db)) -> PersonRepository:
    return PersonRepository(db)


def get_ledger_repository(db = Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_group_repository(db = Depends(get_db)) -> GroupRepository:
    return GroupRepository(db)


def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository)
) -> UserService:
    return UserService(user_repo)


def get_person_service(
    person_repo: PersonRepository = Depends(get_person_repository),
    ledger_repo: LedgerRepository = Depends(get_ledger_repository)
) -> PersonService:
    return PersonService(person_repo, ledger_repo)


def get_ledger_service(
    ledger_repo: LedgerRepository = Depends(get_ledger_repository),
    person_repo: PersonRepository = Depends(get_person_repository),
    user_repo: UserRepository = Depends(get_user_repository)
) -> LedgerService:
    return LedgerService(ledger_repo, person_repo, user_repo)


def get_group_service(
    group_repo: GroupRepository = Depends(get_group_repository)
) -> GroupService:
    return GroupService(group_repo)
