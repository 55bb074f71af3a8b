from fastapi import APIRouter

from shf.api.routers import applications, auth, companies

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(companies.router)
api_router.include_router(applications.router)
