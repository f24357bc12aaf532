from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.dependencies import LOGIN_VIEW_PATH
from app.core.errors import SessionRequiredError
from app.services.employee_client import employee_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await employee_client.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeClient, continuing without the employee API")
    yield
    await employee_client.close()


app = FastAPI(
    title="Employee API Demo",
    description="CRUD demo against a REST employee resource behind a session gate",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(SessionRequiredError)
async def redirect_to_login(request: Request, exc: SessionRequiredError) -> RedirectResponse:
    return RedirectResponse(LOGIN_VIEW_PATH, status_code=status.HTTP_303_SEE_OTHER)


@app.get("/")
async def root():
    return {"message": "Employee API Demo"}
