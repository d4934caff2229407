import os

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from splitnest.database import engine, Base
from splitnest.errors import LedgerError
from splitnest.logging_config import setup_logging
from splitnest.middleware import RequestLoggingMiddleware
from splitnest.ratelimit import limiter
from splitnest.routes import participants, expenses, payments, balances

load_dotenv()

# Sentry
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        send_default_pii=False,
    )

logger = setup_logging()

app = FastAPI(title="SplitNest API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# CORS
origins = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in origins],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-Admin-Token"],
)
app.add_middleware(RequestLoggingMiddleware)

# Create tables (use Alembic in production)
Base.metadata.create_all(bind=engine)

# Routes
app.include_router(participants.router, prefix="/api")
app.include_router(expenses.router, prefix="/api")
app.include_router(payments.router, prefix="/api")
app.include_router(balances.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}
