# app/features/story_script/router.py
from fastapi import APIRouter, Depends, HTTPException

from app.errors import GenerationError, IllegalTransition
from app.features.project.schemas import StudioState
from app.features.project.service import StudioSession, get_session
from app.logger import get_logger
from .schemas import IdeaRequest
from .service import spark_story

router = APIRouter(prefix="/api/v1", tags=["idea"])
log = get_logger(__name__)


@router.post("/studio/idea", response_model=StudioState)
async def idea_endpoint(req: IdeaRequest, session: StudioSession = Depends(get_session)) -> StudioState:
    try:
        await spark_story(session, req)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    except GenerationError as e:
        raise HTTPException(502, f"Failed to spark the story, please try again: {e.cause}")
    return session.state()
