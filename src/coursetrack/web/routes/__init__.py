"""Route handlers for Web API."""

from coursetrack.web.routes.health import router as health_router
from coursetrack.web.routes.course import router as course_router
from coursetrack.web.routes.progress import router as progress_router
from coursetrack.web.routes.quiz import router as quiz_router
from coursetrack.web.routes.badges import router as badges_router
from coursetrack.web.routes.certificates import router as certificates_router
from coursetrack.web.routes.profile import router as profile_router

__all__ = [
    "health_router",
    "course_router",
    "progress_router",
    "quiz_router",
    "badges_router",
    "certificates_router",
    "profile_router",
]
