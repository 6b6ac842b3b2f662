from fastapi import APIRouter

from admissions.modules.applicants import router as applicants_router
from admissions.modules.auth import router as auth_router
from admissions.modules.dashboard import router as dashboard_router
from admissions.modules.notifications import router as notifications_router
from admissions.modules.schedule import router as schedule_router

api_router = APIRouter()

# /register, /login, /forgot-password, /reset-password sit directly under /api
api_router.include_router(auth_router, tags=["Authentication"])

api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])

api_router.include_router(applicants_router, prefix="/applicants", tags=["Applicants"])

api_router.include_router(schedule_router, prefix="/schedule", tags=["Schedule"])
