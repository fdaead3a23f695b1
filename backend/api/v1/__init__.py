from fastapi import APIRouter

from .auth import router as auth_router
from .projects import router as project_router
from .tasks import router as task_router

router = APIRouter(prefix="/api")
router.include_router(auth_router)
router.include_router(project_router)
router.include_router(task_router)
