"""
FastAPI dependencies shared by the routers.
"""

from typing import Optional
from fastapi import Depends, Header, HTTPException, Request

from notetube.core.pipeline import NotePipeline
from notetube.core.study_tools import StudyTools
from notetube.db import crud
from notetube.db.database import DBSession, get_db
from notetube.models.schemas import UserPreferences


def get_current_user_id(x_user_id: Optional[int] = Header(None)) -> int:
    """Identify the caller by the X-User-Id header."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def _service(request: Request, name: str):
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Service not configured. Check GROQ_API_KEY.")
    return getattr(services, name)


def get_pipeline(request: Request) -> NotePipeline:
    return _service(request, "pipeline")


def get_study_tools(request: Request) -> StudyTools:
    return _service(request, "study_tools")


def get_user_preferences(
    user_id: int = Depends(get_current_user_id),
    db: DBSession = Depends(get_db),
) -> UserPreferences:
    """Stored preferences of the caller, or the defaults."""
    row = crud.get_preferences(db, user_id)
    return UserPreferences.model_validate(row) if row else UserPreferences()
