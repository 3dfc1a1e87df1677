from fastapi import APIRouter

from zenhr.api.auth import auth_router
from zenhr.api.organization import departments_router, permissions_router, settings_router
from zenhr.api.reports import reports_router
from zenhr.api.requests import requests_router
from zenhr.api.users import users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(requests_router)
api_router.include_router(users_router)
api_router.include_router(departments_router)
api_router.include_router(permissions_router)
api_router.include_router(settings_router)
api_router.include_router(reports_router)
