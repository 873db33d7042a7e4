"""Health check: database connectivity and signing configuration."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_token_engine
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.token_engine import TokenEngine

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenEngine, Depends(get_token_engine)],
) -> HealthResponse:
    """Report whether the account database is reachable. Used by load balancers."""
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        token_issuer=tokens.config.issuer,
    )
