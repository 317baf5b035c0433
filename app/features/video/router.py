# app/features/video/router.py
import os

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from app.features.project.service import StudioSession, get_session
from app.logger import get_logger
from app.schemas import Step
from .schemas import TrailerState
from .service import TrailerJob

router = APIRouter(prefix="/api/v1", tags=["video"])
log = get_logger(__name__)

_CONTENT_URL = "/api/v1/studio/video/content"


@router.post("/studio/video", status_code=202, response_model=TrailerState)
async def start_trailer(session: StudioSession = Depends(get_session)) -> TrailerState:
    if session.project.current_step != Step.DIRECTOR:
        raise HTTPException(409, "trailers are made from the director step")
    if not session.project.pages:
        raise HTTPException(422, "The book has no pages to make a trailer from.")
    session.cancel_video()
    job = TrailerJob(session.gateway, session.project.title, session.pages.summary())
    session.video = job.start()
    log.info(f"trailer started for project {session.project.id}")
    return job.state()


@router.get("/studio/video", response_model=TrailerState)
async def trailer_status(session: StudioSession = Depends(get_session)) -> TrailerState:
    if session.video is None:
        raise HTTPException(404, "no trailer in progress")
    return session.video.state(video_url=_CONTENT_URL)


@router.delete("/studio/video")
async def cancel_trailer(session: StudioSession = Depends(get_session)) -> dict:
    return {"cancelled": session.cancel_video()}


@router.get("/studio/video/content")
async def trailer_content(session: StudioSession = Depends(get_session)):
    job = session.video
    if job is None or not job.video_path or not os.path.exists(job.video_path):
        raise HTTPException(404, "trailer is not ready")
    return FileResponse(job.video_path, media_type="video/mp4", filename="trailer.mp4")
