"""
FastAPI backend for coach session scheduling and package entitlements.
Booking, rescheduling, cancellation and completion run as single transactions
against Postgres; webhooks are best effort after commit.
Deployment-ready: CORS, configurable host/port via env.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coachbook.core.config import get_settings
from coachbook.core.exceptions import DomainException
from coachbook.routers import coaches, purchases, sessions

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Coach Session Booking API",
    description="Session scheduling, calendar conflict checks and package entitlement ledger.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainException)
def domain_exception_handler(request: Request, exc: DomainException):
    http_exc = exc.to_http_exception()
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


app.include_router(sessions.router)
app.include_router(coaches.router)
app.include_router(purchases.router)


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
