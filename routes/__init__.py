"""Router registry: every router the app mounts, in inclusion order."""

from routes.auth_routes import router as auth_router
from routes.checkin_routes import router as checkin_router
from routes.project_routes import router as project_router
from routes.settings_routes import router as settings_router
from routes.team_routes import router as team_router
from routes.user_routes import router as user_router

routers = [
    auth_router,
    user_router,
    team_router,
    project_router,
    settings_router,
    checkin_router,
]

__all__ = ["routers"]
