# app/features/pages/director.py
from typing import Optional, Tuple

from app.errors import GenerationError
from app.features.project.service import StudioSession
from app.logger import get_logger
from app.schemas import Page, PageSuggestion, Step, VisualStyle
from .schemas import GenerationSummary

log = get_logger(__name__)


async def add_page(session: StudioSession) -> Tuple[Page, Optional[str]]:
    """
    Ask the provider for the next page and insert it before the back page.
    A failed suggestion still inserts a page with the default text.
    """
    session.require_step(Step.DIRECTOR)
    pages = session.pages
    notice = None
    try:
        suggestion = await session.gateway.generate_next_page_suggestion(
            session.project.original_idea, pages.last_story_text()
        )
    except GenerationError as e:
        log.warning(f"next page suggestion failed, inserting a blank page: {e.cause}")
        suggestion = PageSuggestion()
        notice = "Could not come up with the next page; a blank one was added instead."
    page = pages.insert_story_page(suggestion)
    session.touch()
    return page, notice


def delete_page(session: StudioSession, index: int) -> Page:
    session.require_step(Step.DIRECTOR)
    page = session.pages.delete_page(index)
    session.touch()
    return page


def edit_page_text(session: StudioSession, index: int, text: str) -> Page:
    session.require_step(Step.DIRECTOR)
    page = session.pages.update_page_text(index, text)
    session.touch()
    return page


async def redraw_page(session: StudioSession, index: int) -> Page:
    session.require_step(Step.DIRECTOR)
    pages = session.pages
    page = pages.page_at(index)
    await pages.regenerate_image(
        index, session.gateway, session.project.character_seed_image, session.project.visual_style
    )
    session.touch()
    idx = pages.index_of(page.id)
    return pages[idx] if idx is not None else page


async def draw_all(session: StudioSession, clear_existing: bool) -> GenerationSummary:
    session.require_step(Step.DIRECTOR)
    summary = await session.pages.generate_all(
        clear_existing, session.gateway, session.project.character_seed_image, session.project.visual_style
    )
    session.touch()
    return summary


def change_style(session: StudioSession, style: VisualStyle) -> None:
    """New style for future illustrations; existing images stay until redrawn."""
    session.require_step(Step.DIRECTOR)
    session.update(visual_style=style)
