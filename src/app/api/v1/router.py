from fastapi import APIRouter

from src.app.api.v1 import hours, lifecycle, projects

api_router = APIRouter(prefix="/api/v1")
# projects first: its fixed paths (/near-deadline) must win over /{project_id}
api_router.include_router(projects.router)
api_router.include_router(lifecycle.router)
api_router.include_router(hours.router)
