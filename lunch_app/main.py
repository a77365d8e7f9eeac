"""FastAPI entrypoint for the lunch ordering service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from lunch_app.api.v1.api import api_router
from lunch_app.core.config import settings
from lunch_app.db import session as db_session
from lunch_app.db.base import Base
from lunch_app.services.account_service import ensure_default_admin
from lunch_app.services.totals import InvalidAmountError

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(InvalidAmountError)
def invalid_amount_handler(request: Request, exc: InvalidAmountError) -> JSONResponse:
    logger.error("Totals failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Stored price is not a valid amount"},
    )


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            admin_present = ensure_default_admin(session)
            logger.info("[BOOTSTRAP] default admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin bootstrap failed; continuing startup.")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.app_env}
