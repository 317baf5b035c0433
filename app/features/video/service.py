# app/features/video/service.py
from __future__ import annotations

import asyncio
from typing import Optional

from app.errors import GenerationError
from app.lib.gateway import GenerationGateway
from app.logger import get_logger
from .schemas import TrailerState, TrailerStatus

log = get_logger(__name__)


class TrailerJob:
    """
    One trailer render running as a background task. The result stays on the
    job; nothing is written back into the project, so cancelling at any point
    leaves the project exactly as it was.
    """

    def __init__(self, gateway: GenerationGateway, title: str, summary: str):
        self.gateway = gateway
        self.title = title
        self.summary = summary
        self.status = TrailerStatus.RUNNING
        self.progress = "Writing the movie script..."
        self.video_path: Optional[str] = None
        self.error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    def start(self) -> "TrailerJob":
        self._task = asyncio.create_task(self.run())
        return self

    def _on_progress(self, message: str) -> None:
        if self.status == TrailerStatus.RUNNING:
            self.progress = message

    async def run(self) -> Optional[str]:
        try:
            path = await self.gateway.generate_video(self.title, self.summary, self._on_progress)
        except asyncio.CancelledError:
            self.status = TrailerStatus.CANCELLED
            log.info(f"trailer for '{self.title}' cancelled")
            raise
        except GenerationError as e:
            self.status = TrailerStatus.FAILED
            self.error = e.cause
            log.error(f"trailer for '{self.title}' failed: {e.cause}")
            return None
        except Exception as e:
            self.status = TrailerStatus.FAILED
            self.error = str(e)
            log.exception(f"trailer for '{self.title}' crashed: {e}")
            return None
        if self.status == TrailerStatus.RUNNING:
            self.video_path = path
            self.status = TrailerStatus.DONE
        return self.video_path

    def cancel(self) -> bool:
        if self.status != TrailerStatus.RUNNING:
            return False
        self.status = TrailerStatus.CANCELLED
        if self._task is not None:
            self._task.cancel()
        return True

    def state(self, video_url: Optional[str] = None) -> TrailerState:
        return TrailerState(
            status=self.status,
            progress=self.progress,
            video_url=video_url if self.video_path else None,
            error=self.error,
        )
