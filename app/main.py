# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.database import Base, engine
from app.routers import (
    auth,
    users,
    onboarding,
    departments,
    department_requirements,
    courses,
    plans,
    graduation_requirements,
)

import time
import logging
from fastapi import Request
from app.logging_config import setup_logging

# register tables on Base.metadata
from app.models import user, department, department_requirement, course, plan, graduation_requirement  # noqa: F401


setup_logging()
logger = logging.getLogger("app")


# create tables if missing
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Course Planner Backend", version="1.0.0")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
        ms = int((time.time() - start) * 1000)
        logger.info("%s %s -> %s (%dms)", request.method, request.url.path, response.status_code, ms)
        return response
    except Exception:
        ms = int((time.time() - start) * 1000)
        logger.exception("Unhandled error %s %s (%dms)", request.method, request.url.path, ms)
        raise


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(onboarding.router)
app.include_router(departments.router)
app.include_router(department_requirements.router)
app.include_router(courses.router)
app.include_router(plans.router)
app.include_router(graduation_requirements.router)


@app.get("/")
def root():
    return {"message": "Course planner backend is running!"}


@app.get("/health")
def health():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("health check failed")
        return JSONResponse(status_code=503, content={"status": "error"})
    return {"status": "ok"}
