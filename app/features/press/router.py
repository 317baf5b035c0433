# app/features/press/router.py
import os
import shutil
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import FileResponse

from app.config import config, make_job_dir
from app.features.project.service import StudioSession, get_session
from app.lib.pdf import make_book_pdf
from app.logger import get_logger
from app.schemas import Step
from .schemas import GotoRequest, SpreadView

router = APIRouter(prefix="/api/v1", tags=["press"])
log = get_logger(__name__)


def _reader_view(session: StudioSession) -> SpreadView:
    if session.project.current_step != Step.PRESS:
        raise HTTPException(409, "the book is not at the press step")
    if not session.project.pages:
        raise HTTPException(404, "the book has no pages")
    return session.reader.view(session.project.pages)


@router.get("/studio/press", response_model=SpreadView)
async def current_spread(session: StudioSession = Depends(get_session)) -> SpreadView:
    return _reader_view(session)


@router.post("/studio/press/next", response_model=SpreadView)
async def next_spread(session: StudioSession = Depends(get_session)) -> SpreadView:
    _reader_view(session)
    session.reader.next()
    return _reader_view(session)


@router.post("/studio/press/prev", response_model=SpreadView)
async def prev_spread(session: StudioSession = Depends(get_session)) -> SpreadView:
    _reader_view(session)
    session.reader.prev()
    return _reader_view(session)


@router.post("/studio/press/goto", response_model=SpreadView)
async def goto_spread(req: GotoRequest, session: StudioSession = Depends(get_session)) -> SpreadView:
    _reader_view(session)
    session.reader.goto(req.index)
    return _reader_view(session)


@router.get("/studio/press/pdf")
async def export_pdf(background_tasks: BackgroundTasks, session: StudioSession = Depends(get_session)):
    _reader_view(session)
    workdir = make_job_dir("press_")
    # auto-clean temp directory after response is sent
    if not config.keep_outputs:
        background_tasks.add_task(shutil.rmtree, workdir, ignore_errors=True)
    pdf_name = os.path.join(workdir, f"book_{uuid.uuid4().hex}.pdf")
    try:
        make_book_pdf(session.project.pages, pdf_name=pdf_name, title=session.project.title)
    except Exception as e:
        log.exception(f"PDF export failed: {e}")
        raise HTTPException(500, f"PDF export failed: {e}")
    return FileResponse(pdf_name, media_type="application/pdf", filename="storybook.pdf")
