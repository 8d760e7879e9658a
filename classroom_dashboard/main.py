import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from classroom_dashboard.core.logging_middleware import LoggingMiddleware
from classroom_dashboard.db.init_db import init_db
from classroom_dashboard.routers.attendance import router as attendance_router
from classroom_dashboard.routers.auth import router as auth_router
from classroom_dashboard.routers.courses import router as courses_router
from classroom_dashboard.routers.dashboard import router as dashboard_router
from classroom_dashboard.services.classroom_client import ClassroomAPIError

logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)

app = FastAPI(title="Classroom Dashboard")

# Middleware
app.add_middleware(LoggingMiddleware)


# Platform failures surface as 404 / 403 / 502 instead of 500
@app.exception_handler(ClassroomAPIError)
async def classroom_api_error_handler(request: Request, exc: ClassroomAPIError):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        code = status.HTTP_404_NOT_FOUND
    elif exc.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_502_BAD_GATEWAY

    logger.warning("Classroom API error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message})


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(courses_router, prefix="/courses", tags=["courses"])
app.include_router(attendance_router, prefix="/courses", tags=["attendance"])

# Dashboard (no prefix, route already defines full path)
app.include_router(dashboard_router)
