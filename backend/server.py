"""FastAPI application exposing the expense REST API."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import List

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vaulttrack.logging import setup_logger

from . import crud, database, schemas
from .config import settings

LOG = logging.getLogger(__name__)

INVALID_PAYLOAD = "Invalid expense payload"
SERVER_ERROR = "Server Error"


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logger("backend")
    database.init_db()
    yield


router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=List[schemas.ExpenseRead])
def list_expenses(
    sort: str = Query("date", description="Sort field: date or createdAt"),
    order: str = Query("desc", description="Sort direction: desc or asc"),
    db: Session = Depends(database.get_db),
) -> List[schemas.ExpenseRead]:
    return crud.list_expenses(db, sort_key=sort, direction=order)


@router.post("", response_model=schemas.ExpenseRead, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_in: schemas.ExpenseCreate,
    db: Session = Depends(database.get_db),
) -> schemas.ExpenseRead:
    return crud.create_expense(db, expense_in)


@router.get("/{expense_id}", response_model=schemas.ExpenseRead)
def get_expense(expense_id: str, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    return crud.get_expense(db, expense_id)


@router.delete("/{expense_id}", response_model=schemas.DeleteResult)
def delete_expense(expense_id: str, db: Session = Depends(database.get_db)) -> schemas.DeleteResult:
    removed = crud.delete_expense(db, expense_id)
    return schemas.DeleteResult(id=removed)


# The rejected input may be NaN or infinite, which JSON cannot carry.
_UNECHOED_ERROR_KEYS = ("input", "ctx", "url")


def _invalid_payload(errors: list) -> JSONResponse:
    cleaned = [
        {key: value for key, value in error.items() if key not in _UNECHOED_ERROR_KEYS}
        for error in errors
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": INVALID_PAYLOAD, "errors": jsonable_encoder(cleaned)},
    )


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return _invalid_payload(list(exc.errors()))


async def _store_validation_handler(_: Request, exc: crud.ExpenseValidationError) -> JSONResponse:
    if exc.errors:
        return _invalid_payload(exc.errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def _not_found_handler(_: Request, exc: crud.ExpenseNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _store_failure_handler(request: Request, exc: Exception) -> JSONResponse:
    LOG.error(
        "Store failure on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path, "status_code": 500},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SERVER_ERROR},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="VaultTrack Expense Backend", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000.0
        LOG.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response

    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(crud.ExpenseValidationError, _store_validation_handler)
    app.add_exception_handler(crud.ExpenseNotFoundError, _not_found_handler)
    app.add_exception_handler(crud.StoreUnavailableError, _store_failure_handler)
    app.add_exception_handler(SQLAlchemyError, _store_failure_handler)

    @app.get("/health", tags=["system"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    """Entrypoint for running the development server."""

    import uvicorn

    uvicorn.run("backend.server:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
