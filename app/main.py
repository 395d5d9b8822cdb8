from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes_demo import router as demo_router
from app.api.routes_orders import router as orders_router
from app.core.config import get_settings
from app.core.errors import OrderAdminError, UnauthenticatedError
from app.core.logging import configure_logging
from app.demo import seed_default_scenario
from app.persistence.pg import init_db, session_scope

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(title=settings.app_name)


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    if settings.bootstrap_demo_on_startup:
        with session_scope() as session:
            result = seed_default_scenario(session)
        logger.info(
            "demo scenario ready: scenario_id=%s seeded_now=%s",
            result.get("scenario_id"),
            result.get("seeded_now"),
        )


@app.exception_handler(OrderAdminError)
async def order_admin_error_handler(request: Request, exc: OrderAdminError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc.__cause__)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": str(exc),
            "error": exc.error,
        },
        headers=headers,
    )


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


app.include_router(demo_router)
app.include_router(orders_router)


def run() -> None:
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
