# app/features/project/router.py
from fastapi import APIRouter, Depends, HTTPException

from app.errors import IllegalTransition
from app.logger import get_logger
from .schemas import AdvanceRequest, ProjectPatch, StudioState, ViewRequest
from .service import StudioSession, entry_problem, get_session

router = APIRouter(prefix="/api/v1", tags=["studio"])
log = get_logger(__name__)


@router.get("/studio", response_model=StudioState)
async def studio_state(session: StudioSession = Depends(get_session)) -> StudioState:
    return session.state()


@router.post("/studio/advance", response_model=StudioState)
async def studio_advance(req: AdvanceRequest, session: StudioSession = Depends(get_session)) -> StudioState:
    """
    Generic step change. Moving forward into director/press is refused
    when the target step's precondition does not hold.
    """
    changes = req.patch.changes()
    problem = entry_problem(session.project.model_copy(update=changes), req.step)
    if problem and req.step != session.project.current_step:
        raise HTTPException(422, problem)
    try:
        session.advance(req.step, **changes)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return session.state()


@router.post("/studio/back", response_model=StudioState)
async def studio_back(session: StudioSession = Depends(get_session)) -> StudioState:
    try:
        session.back()
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return session.state()


@router.patch("/studio/project", response_model=StudioState)
async def studio_update(patch: ProjectPatch, session: StudioSession = Depends(get_session)) -> StudioState:
    session.update(**patch.changes())
    return session.state()


@router.post("/studio/reset", response_model=StudioState)
async def studio_reset(session: StudioSession = Depends(get_session)) -> StudioState:
    session.reset()
    return session.state()


@router.get("/studio/view", response_model=StudioState)
async def studio_view(session: StudioSession = Depends(get_session)) -> StudioState:
    return session.state()


@router.put("/studio/view", response_model=StudioState)
async def studio_set_view(req: ViewRequest, session: StudioSession = Depends(get_session)) -> StudioState:
    session.set_view(req.view)
    return session.state()
