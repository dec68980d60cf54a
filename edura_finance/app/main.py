# Edura finance backend entrypoint: billing, tutor pay, expenses and reports.

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from edura_finance.app.api import (
    billings,
    classes,
    expenses,
    finance_reports,
    login,
    register,
    teacher_billing,
    teacher_rates,
    tutor_payments,
)
from edura_finance.app.core.dev_seed import ensure_default_dev_manager
from edura_finance.app.core.errors import (
    CategoryInUseError,
    FinanceError,
    FinanceValidationError,
    RateInUseError,
    RecordNotFoundError,
)
from edura_finance.app.core.logging import configure_logging
from edura_finance.app.core.settings import get_settings
from edura_finance.app.db.session import SessionLocal

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(classes.router)
app.include_router(billings.router)
app.include_router(teacher_rates.router)
app.include_router(tutor_payments.router)
app.include_router(expenses.router)
app.include_router(finance_reports.router)
app.include_router(teacher_billing.router)


def _status_for(exc: FinanceError) -> int:
    if isinstance(exc, RecordNotFoundError):
        return 404
    if isinstance(exc, (RateInUseError, CategoryInUseError)):
        return 409
    if isinstance(exc, FinanceValidationError):
        return 422
    return 400


@app.exception_handler(FinanceError)
async def finance_error_handler(request: Request, exc: FinanceError):
    status_code = _status_for(exc)
    logger.info("%s %s -> %s: %s", request.method, request.url.path, status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/")
def read_root():
    return {"app": "Edura Finance backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def seed_default_dev_manager():
    db = SessionLocal()
    try:
        ensure_default_dev_manager(db)
    finally:
        db.close()
