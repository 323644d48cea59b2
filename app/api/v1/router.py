"""API v1 router: health plus the lifecycle and audit routes."""

from fastapi import APIRouter

from app.api.v1.endpoints import audit_log, health, semesters, topics, users

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(semesters.router, prefix="/semesters", tags=["semesters"])
api_router.include_router(topics.router, prefix="/topics", tags=["topics"])
api_router.include_router(audit_log.router, prefix="/audit-logs", tags=["audit-logs"])
