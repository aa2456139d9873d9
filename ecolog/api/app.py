"""FastAPI web application for EcoLog."""

import logging
import os
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from ecolog import __version__
from ecolog.api.schemas import ActionCreateRequest, AccountTypeRequest, AuthResponse, ActionListResponse
from ecolog.auth.dependencies import get_current_user, get_storage
from ecolog.auth.jwt import create_access_token
from ecolog.engine.metrics import window_start_for_period
from ecolog.errors import ValidationError, NotFoundError, PersistenceError
from ecolog.models.action import Action, ImpactMetrics
from ecolog.models.constants import (
    DEFAULT_ACTIONS_LIMIT,
    DEFAULT_LEADERBOARD_LIMIT,
    MAX_LEADERBOARD_LIMIT,
    PERIOD_MONTH,
    PERIOD_QUARTER,
)
from ecolog.models.metrics import UserMetrics, CorporateMetrics, LeaderboardEntry
from ecolog.models.user import User, AccountType
from ecolog.services import eco_log
from ecolog.storage.base import Storage, create_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Select the storage backend once per process."""
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    owns_storage = getattr(app.state, "storage", None) is None
    if owns_storage:
        app.state.storage = create_storage()
    try:
        yield
    finally:
        if owns_storage:
            app.state.storage.close()
            app.state.storage = None


# Initialize FastAPI app
app = FastAPI(
    title="EcoLog API",
    description="Log sustainability actions and track their environmental impact",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "field": exc.field},
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# Auth

@app.post("/auth/guest", response_model=AuthResponse)
def create_guest_session(storage: Storage = Depends(get_storage)):
    """Create a guest user and return a bearer token for it."""
    user = eco_log.create_guest_user(storage)
    return AuthResponse(access_token=create_access_token(user.id), user=user)


@app.get("/auth/user", response_model=User)
def read_current_user(current_user: User = Depends(get_current_user)):
    """Get the authenticated user."""
    return current_user


@app.post("/auth/account-type", response_model=User)
def update_account_type(
    request: AccountTypeRequest,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Switch the current user between individual and corporate."""
    return eco_log.set_account_type(storage, current_user.id, request.account_type, request.company_name)


# Impact

@app.get("/impact", response_model=ImpactMetrics)
def preview_impact(category: str, quantity: Optional[str] = None):
    """Preview the impact of an action without logging it."""
    return eco_log.compute_impact(category, quantity)


# Actions

@app.post("/actions", response_model=Action, status_code=status.HTTP_201_CREATED)
def create_action(
    request: ActionCreateRequest,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Log an action for the current user."""
    return eco_log.log_action(
        storage,
        current_user.id,
        category=request.category,
        title=request.title,
        description=request.description,
        quantity=request.quantity,
        unit=request.unit,
        proof_url=request.proof_url,
    )


@app.get("/actions", response_model=ActionListResponse)
def list_actions(
    limit: int = Query(DEFAULT_ACTIONS_LIMIT, ge=1),
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """List the current user's actions, newest first."""
    actions = eco_log.get_user_actions(storage, current_user.id, limit)
    return ActionListResponse(actions=actions, count=len(actions))


# Metrics

@app.get("/metrics/personal", response_model=UserMetrics)
def personal_metrics(
    period: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Personal metrics; `period=month` limits sums to the current month."""
    window_start = window_start_for_period(period) if period == PERIOD_MONTH else None
    return eco_log.get_metrics(storage, current_user.id, window_start)


@app.get("/metrics/corporate", response_model=CorporateMetrics)
def corporate_metrics(
    period: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Corporate metrics; `period=quarter` limits sums to the last three months."""
    if current_user.account_type != AccountType.CORPORATE.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only corporate accounts can access this endpoint",
        )
    window_start = window_start_for_period(period) if period == PERIOD_QUARTER else None
    return eco_log.get_corporate_metrics(storage, current_user.id, window_start)


# Leaderboard

@app.get("/leaderboard", response_model=List[LeaderboardEntry])
def leaderboard(
    type: str = Query(AccountType.INDIVIDUAL.value, description="individual | corporate"),
    limit: int = Query(DEFAULT_LEADERBOARD_LIMIT, ge=1, le=MAX_LEADERBOARD_LIMIT),
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Leaderboard of one account type ranked by lifetime CO2 reduced."""
    return eco_log.get_leaderboard(storage, type, limit)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
