# app/features/project/service.py
"""
The four-step wizard (idea -> character -> director -> press).

Transitions are plain functions from one Project snapshot to the next; the
StudioSession is the explicit context object that holds the active project
and applies them, keeping the library in sync.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request

from app.config import config
from app.errors import IllegalTransition
from app.features.library.service import LibraryStore
from app.features.pages.service import PageCollection
from app.features.press.service import PaginationController
from app.features.project.schemas import StudioState, View
from app.lib.gateway import GenerationGateway, OpenAIGateway
from app.lib.storage import JsonStorage
from app.logger import get_logger
from app.schemas import STEPS, Project, Step

log = get_logger(__name__)

_FROZEN_FIELDS = {"id", "created_at"}


# -------------------------------------------------------------------
# Transitions
# -------------------------------------------------------------------

def new_project() -> Project:
    return Project()


def _merge(project: Project, patch: Optional[Dict[str, Any]]) -> Project:
    patch = dict(patch or {})
    frozen = _FROZEN_FIELDS & patch.keys()
    if frozen:
        raise ValueError(f"cannot patch {', '.join(sorted(frozen))}")
    data = project.model_dump()
    data.update(patch)
    return Project.model_validate(data)


def advance(project: Project, step: Step, patch: Optional[Dict[str, Any]] = None) -> Project:
    """
    Merge `patch` and move to `step`. Only the current step, its successor
    or its predecessor are reachable. Business preconditions of the target
    step are checked by the caller, not here.
    """
    step = Step(step)
    distance = STEPS.index(step) - STEPS.index(project.current_step)
    if abs(distance) > 1:
        raise IllegalTransition(f"cannot go from {project.current_step.value} to {step.value}")
    return _merge(project, {**(patch or {}), "current_step": step})


def go_back(project: Project) -> Project:
    pos = STEPS.index(project.current_step)
    if pos == 0:
        raise IllegalTransition("already at the first step")
    return advance(project, STEPS[pos - 1])


def update(project: Project, patch: Dict[str, Any]) -> Project:
    if "current_step" in patch:
        raise ValueError("use advance() to change steps")
    return _merge(project, patch)


def entry_problem(project: Project, step: Step) -> Optional[str]:
    """
    Precondition a view must check before moving the project to `step`.
    Returns a user-facing reason, or None when the move is allowed.
    """
    step = Step(step)
    if step == Step.DIRECTOR and not project.character_seed_image:
        return "Choose a character design before directing the scenes."
    if step == Step.PRESS and not project.pages:
        return "The book has no pages to print yet."
    return None


def open_project(entry: Project, step: Optional[Step] = None) -> Project:
    """Working copy of a saved book; the override lands on the copy only."""
    copy = entry.model_copy(deep=True)
    if step is not None:
        copy.current_step = Step(step)
    return copy


# -------------------------------------------------------------------
# Session
# -------------------------------------------------------------------

class StudioSession:
    def __init__(self, library: LibraryStore, gateway: GenerationGateway):
        self.library = library
        self.gateway = gateway
        self.view = View.STUDIO
        self.project = new_project()
        self.reader = PaginationController(1)
        self.video = None
        self.storage_warning: Optional[str] = None

    # state ----------------------------------------------------------

    def state(self) -> StudioState:
        return StudioState(view=self.view, project=self.project, storage_warning=self.storage_warning)

    @property
    def pages(self) -> PageCollection:
        return PageCollection(self.project.pages)

    def _commit(self, project: Project, carry_pages: bool = False) -> Optional[str]:
        """
        Install a new snapshot; a press-ready book is saved to the library.
        carry_pages keeps the live page list, so an illustration pass still
        running against it is not cut off by an unrelated field change.
        """
        if carry_pages:
            project.pages = self.project.pages
        self.project = project
        self.reader.resize(len(project.pages))
        self.storage_warning = None
        if project.current_step == Step.PRESS and project.pages:
            result = self.library.upsert(project)
            self.storage_warning = result.warning
        return self.storage_warning

    def touch(self) -> Optional[str]:
        """Call after mutating self.pages in place."""
        return self._commit(self.project)

    def require_step(self, *steps: Step) -> None:
        if self.project.current_step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise IllegalTransition(
                f"this action needs the {allowed} step; the project is at {self.project.current_step.value}"
            )

    # transitions ----------------------------------------------------

    def advance(self, step: Step, **patch: Any) -> Optional[str]:
        previous = self.project.current_step
        warning = self._commit(advance(self.project, step, patch), carry_pages="pages" not in patch)
        if previous != self.project.current_step:
            log.info(f"project {self.project.id}: {previous.value} -> {self.project.current_step.value}")
        if self.project.current_step == Step.PRESS and previous != Step.PRESS:
            self.reader.goto(0)
        return warning

    def update(self, **patch: Any) -> Optional[str]:
        return self._commit(update(self.project, patch), carry_pages="pages" not in patch)

    def back(self) -> Optional[str]:
        return self._commit(go_back(self.project), carry_pages=True)

    def reset(self) -> Project:
        self.cancel_video()
        self._commit(new_project())
        self.reader.goto(0)
        self.view = View.STUDIO
        log.info(f"started new project {self.project.id}")
        return self.project

    def open_from_library(self, project_id: str, step: Optional[Step] = Step.PRESS) -> Optional[Project]:
        entry = self.library.get(project_id)
        if entry is None:
            return None
        self.cancel_video()
        self._commit(open_project(entry, step))
        self.reader.goto(0)
        self.view = View.STUDIO
        return self.project

    def set_view(self, view: View) -> None:
        self.view = View(view)

    def cancel_video(self) -> bool:
        if self.video is None:
            return False
        cancelled = self.video.cancel()
        self.video = None
        return cancelled


def build_session() -> StudioSession:
    library = LibraryStore(JsonStorage(config.library_path, quota_bytes=config.storage_quota_bytes))
    library.load()
    return StudioSession(library=library, gateway=OpenAIGateway())


def get_session(request: Request) -> StudioSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        session = request.app.state.session = build_session()
    return session
