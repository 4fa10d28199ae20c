import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from app.core.config import settings
from app.core.logging_middleware import LoggingMiddleware
from app.db.init_db import init_db
from app.routers.analytics import router as analytics_router
from app.routers.announcements import router as announcements_router
from app.routers.auth import router as auth_router
from app.routers.discussions import router as discussions_router
from app.routers.groups import router as groups_router
from app.routers.notifications import router as notifications_router
from app.routers.submissions import router as submissions_router
from app.routers.templates import router as templates_router
from app.routers.uploads import router as uploads_router
from app.routers.users import router as users_router

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Progress Tracker")

# Middleware
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check
@app.get("/api/health")
def health():
    return {"ok": True, "service": "progress-tracker"}


# Startup event
@app.on_event("startup")
def on_startup():
    settings.uploads_path.mkdir(parents=True, exist_ok=True)
    init_db()


# Uploaded files are served as-is
app.mount(
    "/uploads",
    StaticFiles(directory=settings.uploads_path, check_dir=False),
    name="uploads",
)

# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(users_router, prefix="/api", tags=["users"])
app.include_router(uploads_router, prefix="/api/uploads", tags=["uploads"])
app.include_router(submissions_router, prefix="/api/submissions", tags=["submissions"])
app.include_router(analytics_router, prefix="/api", tags=["analytics"])
app.include_router(announcements_router, prefix="/api/announcements", tags=["announcements"])
app.include_router(notifications_router, prefix="/api/notifications", tags=["notifications"])
app.include_router(groups_router, prefix="/api/groups", tags=["groups"])
app.include_router(discussions_router, prefix="/api/groups", tags=["discussions"])
app.include_router(templates_router, prefix="/api/templates", tags=["templates"])
