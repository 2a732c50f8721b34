import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.attendance.router import router as attendance_router
from app.api.auth.router import router as auth_router
from app.api.dashboard.router import router as dashboard_router
from app.api.fees.router import router as fees_router
from app.api.staff.router import router as staff_router
from app.api.students.router import router as students_router
from app.api.subjects.router import router as subjects_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(
        settings.database_url,
        echo=settings.db_echo,
        checkout_warning_seconds=settings.session_checkout_warning_seconds,
    )
    app.state.database = database
    logger.info("Database engine created")
    try:
        yield
    finally:
        await database.dispose()


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="School Management Backend", lifespan=lifespan)

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers (attendance before staff: /api/staff/attendance is not a staff id)
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(attendance_router)
    app.include_router(staff_router)
    app.include_router(subjects_router)
    app.include_router(fees_router)
    app.include_router(dashboard_router)

    public_dir = settings.public_dir

    @app.get("/", include_in_schema=False)
    async def login_page() -> FileResponse:
        return FileResponse(os.path.join(public_dir, "login.html"))

    if os.path.isdir(public_dir):
        app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")

    return app


app = create_app()
