# app/features/video/schemas.py
from enum import Enum
from typing import Optional
from app.schemas import CamelModel


class TrailerStatus(str, Enum):
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TrailerState(CamelModel):
    status: TrailerStatus
    progress: str = ""
    video_url: Optional[str] = None
    error: Optional[str] = None
