from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, people, ledger, groups

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(people.router, prefix="/people", tags=["people"])
api_router.include_router(ledger.router, prefix="/ledger", tags=["ledger"])
api_router.include_router(ledger.dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
