from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import config
from app.features.character.router import router as character_router
from app.features.library.router import router as library_router
from app.features.pages.router import router as pages_router
from app.features.press.router import router as press_router
from app.features.project.router import router as project_router
from app.features.project.service import build_session
from app.features.story_script.router import router as idea_router
from app.features.video.router import router as video_router
from app.logger import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.session = build_session()
    log.info(f"studio ready; library at {config.library_path}")
    yield
    app.state.session.cancel_video()


app = FastAPI(title="Storybook Studio API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=False,           # origins may be "*"
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],  # for downloads via FileResponse
)

app.include_router(project_router)
app.include_router(idea_router)
app.include_router(character_router)
app.include_router(pages_router)
app.include_router(video_router)
app.include_router(press_router)
app.include_router(library_router)
