# app/features/pages/router.py
from fastapi import APIRouter, Depends, HTTPException

from app.errors import IllegalTransition, StructuralViolation
from app.features.project.schemas import StudioState
from app.features.project.service import StudioSession, entry_problem, get_session
from app.logger import get_logger
from app.schemas import Step
from .director import add_page, change_style, delete_page, draw_all, edit_page_text, redraw_page
from .schemas import GenerateAllRequest, GenerateAllResponse, PageResponse, PageTextUpdate, StyleUpdate

router = APIRouter(prefix="/api/v1", tags=["director"])
log = get_logger(__name__)


def _needs_seed(session: StudioSession) -> None:
    if not session.project.character_seed_image:
        raise HTTPException(422, "Choose a character design before illustrating pages.")


@router.post("/studio/pages", status_code=201, response_model=PageResponse)
async def insert_page(session: StudioSession = Depends(get_session)) -> PageResponse:
    try:
        page, notice = await add_page(session)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return PageResponse(page=page, pages=session.project.pages, storage_warning=session.storage_warning, notice=notice)


@router.delete("/studio/pages/{index}", response_model=PageResponse)
async def remove_page(index: int, session: StudioSession = Depends(get_session)) -> PageResponse:
    try:
        page = delete_page(session, index)
    except (IllegalTransition, StructuralViolation) as e:
        raise HTTPException(409, str(e))
    return PageResponse(page=page, pages=session.project.pages, storage_warning=session.storage_warning)


@router.put("/studio/pages/{index}/text", response_model=PageResponse)
async def update_text(index: int, req: PageTextUpdate, session: StudioSession = Depends(get_session)) -> PageResponse:
    try:
        page = edit_page_text(session, index, req.text)
    except (IllegalTransition, StructuralViolation) as e:
        raise HTTPException(409, str(e))
    return PageResponse(page=page, pages=session.project.pages, storage_warning=session.storage_warning)


@router.post("/studio/pages/{index}/image", response_model=PageResponse)
async def regenerate_image(index: int, session: StudioSession = Depends(get_session)) -> PageResponse:
    _needs_seed(session)
    try:
        page = await redraw_page(session, index)
    except (IllegalTransition, StructuralViolation) as e:
        raise HTTPException(409, str(e))
    notice = None if page.image_url else "The illustration could not be drawn; try again."
    return PageResponse(page=page, pages=session.project.pages, storage_warning=session.storage_warning, notice=notice)


@router.post("/studio/pages/generate-all", response_model=GenerateAllResponse)
async def generate_all(req: GenerateAllRequest, session: StudioSession = Depends(get_session)) -> GenerateAllResponse:
    _needs_seed(session)
    try:
        summary = await draw_all(session, req.clear_existing)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return GenerateAllResponse(summary=summary, pages=session.project.pages, storage_warning=session.storage_warning)


@router.put("/studio/style", response_model=StudioState)
async def set_style(req: StyleUpdate, session: StudioSession = Depends(get_session)) -> StudioState:
    try:
        change_style(session, req.style)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return session.state()


@router.post("/studio/press", response_model=StudioState)
async def to_press(session: StudioSession = Depends(get_session)) -> StudioState:
    problem = entry_problem(session.project, Step.PRESS)
    if problem:
        raise HTTPException(422, problem)
    try:
        session.advance(Step.PRESS)
    except IllegalTransition as e:
        raise HTTPException(409, str(e))
    return session.state()
