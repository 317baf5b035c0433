# app/features/library/router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.features.project.schemas import StudioState
from app.features.project.service import StudioSession, get_session
from app.logger import get_logger
from app.schemas import Step
from .schemas import LibraryResponse, OpenBookRequest

router = APIRouter(prefix="/api/v1", tags=["library"])
log = get_logger(__name__)


@router.get("/library", response_model=LibraryResponse)
async def list_books(session: StudioSession = Depends(get_session)) -> LibraryResponse:
    return LibraryResponse(books=session.library.entries())


@router.post("/library/{project_id}/open", response_model=StudioState)
async def open_book(
    project_id: str,
    req: Optional[OpenBookRequest] = None,
    session: StudioSession = Depends(get_session),
) -> StudioState:
    """Open a saved book; "read" opens at press, "edit" passes another step."""
    step = req.step if req is not None else Step.PRESS
    if session.open_from_library(project_id, step) is None:
        raise HTTPException(404, f"unknown book {project_id}")
    return session.state()


@router.delete("/library/{project_id}")
async def delete_book(project_id: str, session: StudioSession = Depends(get_session)) -> dict:
    removed = session.library.remove(project_id)
    if not removed:
        raise HTTPException(404, f"unknown book {project_id}")
    return {"id": project_id, "deleted": True}
