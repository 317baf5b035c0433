# app/features/character/router.py
from fastapi import APIRouter, Depends, HTTPException

from app.errors import GenerationError, IllegalTransition
from app.features.project.schemas import StudioState
from app.features.project.service import StudioSession, get_session
from app.logger import get_logger
from .schemas import CharacterOptionsRequest, CharacterOptionsResponse, CharacterSelectRequest
from .service import design_character, lock_character

router = APIRouter(prefix="/api/v1", tags=["character"])
log = get_logger(__name__)


@router.post("/studio/character/options", response_model=CharacterOptionsResponse)
async def character_options(
    req: CharacterOptionsRequest, session: StudioSession = Depends(get_session)
) -> CharacterOptionsResponse:
    try:
        return CharacterOptionsResponse(options=await design_character(session, req))
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    except GenerationError as e:
        raise HTTPException(502, f"Character design ran into a problem, please try again: {e.cause}")


@router.post("/studio/character/select", response_model=StudioState)
async def character_select(req: CharacterSelectRequest, session: StudioSession = Depends(get_session)) -> StudioState:
    # the seed image is what keeps every scene on-model
    if not req.seed_image:
        raise HTTPException(422, "Choose a character design before directing the scenes.")
    try:
        lock_character(session, req)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return session.state()
