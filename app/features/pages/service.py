# app/features/pages/service.py
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from app.errors import GenerationError, StructuralViolation
from app.features.pages.schemas import GenerationSummary
from app.lib.gateway import GenerationGateway
from app.logger import get_logger
from app.schemas import Page, PageSuggestion, PageType, ScriptPage, VisualStyle

log = get_logger(__name__)

DEFAULT_PAGE_TEXT = "A new day begins..."
DEFAULT_VISUAL_PROMPT = "The character in a new scene"


class PageCollection:
    """
    Ordered pages of one book: the cover first, the back last, story pages
    in between. page_number always equals index + 1; every structural change
    renumbers before returning.

    Wraps the project's own page list, so mutations land on the project.
    """

    def __init__(self, pages: Optional[List[Page]] = None):
        self.pages: List[Page] = pages if pages is not None else []

    @classmethod
    def from_script(cls, script_pages: Iterable[ScriptPage]) -> "PageCollection":
        """
        Build pages from a generated script, forcing the structural layout:
        the first cover moves to the front, the last back moves to the end,
        any other cover/back the model produced becomes a story page.
        """
        drafts = list(script_pages)
        cover = next((p for p in drafts if p.type == PageType.COVER), None)
        back = next((p for p in reversed(drafts) if p.type == PageType.BACK), None)

        ordered: List[Page] = []
        if cover is not None:
            ordered.append(Page(type=PageType.COVER, text=cover.text, visual_prompt=cover.visual_prompt))
        for p in drafts:
            if p is cover or p is back:
                continue
            ordered.append(Page(type=PageType.STORY, text=p.text, visual_prompt=p.visual_prompt))
        if back is not None:
            ordered.append(Page(type=PageType.BACK, text=back.text, visual_prompt=back.visual_prompt))

        collection = cls(ordered)
        collection.renumber()
        return collection

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self.pages)

    def __getitem__(self, index: int) -> Page:
        return self.pages[index]

    # -------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------

    def renumber(self) -> None:
        for i, page in enumerate(self.pages):
            if page.page_number != i + 1:
                self.pages[i] = page.model_copy(update={"page_number": i + 1})

    def index_of(self, page_id: str) -> Optional[int]:
        for i, page in enumerate(self.pages):
            if page.id == page_id:
                return i
        return None

    def back_index(self) -> Optional[int]:
        for i, page in enumerate(self.pages):
            if page.type == PageType.BACK:
                return i
        return None

    def page_at(self, index: int) -> Page:
        if index < 0 or index >= len(self.pages):
            raise StructuralViolation(f"page index {index} is out of range (0..{len(self.pages) - 1})")
        return self.pages[index]

    def _replace(self, page_id: str, **changes) -> Optional[Page]:
        """
        Swap in an updated copy of the page in a single assignment, so
        image_url and is_generating are never observed half-updated.
        Returns None when the page no longer exists.
        """
        idx = self.index_of(page_id)
        if idx is None:
            return None
        updated = self.pages[idx].model_copy(update=changes)
        self.pages[idx] = updated
        return updated

    def insert_story_page(self, suggestion: Optional[PageSuggestion] = None) -> Page:
        text = (suggestion.text if suggestion else "").strip()
        visual_prompt = (suggestion.visual_prompt if suggestion else "").strip()
        page = Page(
            type=PageType.STORY,
            text=text or DEFAULT_PAGE_TEXT,
            visual_prompt=visual_prompt or DEFAULT_VISUAL_PROMPT,
        )
        back = self.back_index()
        if back is None:
            self.pages.append(page)
        else:
            self.pages.insert(back, page)
        self.renumber()
        return self.pages[self.index_of(page.id)]

    def delete_page(self, index: int) -> Page:
        page = self.page_at(index)
        if page.type in (PageType.COVER, PageType.BACK):
            raise StructuralViolation(f"the {page.type.value} page cannot be deleted")
        del self.pages[index]
        self.renumber()
        return page

    def update_page_text(self, index: int, text: str) -> Page:
        page = self.page_at(index)
        return self._replace(page.id, text=text)

    # -------------------------------------------------------------------
    # Illustration
    # -------------------------------------------------------------------

    async def regenerate_image(
        self,
        index: int,
        gateway: GenerationGateway,
        seed_image: Optional[str],
        style: VisualStyle,
    ) -> bool:
        """
        Re-illustrate one page. A provider failure only clears the
        generating flag; the page stays without an image and can be retried.
        The result is written back to the page by id, so it follows the page
        if other pages are inserted or deleted meanwhile.
        """
        page = self.page_at(index)
        self._replace(page.id, image_url=None, is_generating=True)
        try:
            image = await gateway.generate_scene_image(page.text, page.visual_prompt, seed_image or "", style)
        except GenerationError as e:
            log.warning(f"[page {page.page_number}] illustration failed: {e.cause}")
            self._replace(page.id, is_generating=False)
            return False

        if self._replace(page.id, image_url=image, is_generating=False) is None:
            log.info(f"page {page.id} was deleted while its illustration was generating; dropping result")
            return False
        return True

    async def generate_all(
        self,
        clear_existing: bool,
        gateway: GenerationGateway,
        seed_image: Optional[str],
        style: VisualStyle,
    ) -> GenerationSummary:
        """
        Illustrate pages strictly one after another, in index order.
        clear_existing=True wipes every image first and redraws all pages;
        otherwise only pages without an image are drawn.
        """
        if clear_existing:
            for page in list(self.pages):
                self._replace(page.id, image_url=None)

        targets = [p.id for p in self.pages if clear_existing or not p.image_url]
        summary = GenerationSummary()
        for page_id in targets:
            idx = self.index_of(page_id)
            if idx is None:
                continue
            summary.attempted.append(idx)
            ok = await self.regenerate_image(idx, gateway, seed_image, style)
            (summary.succeeded if ok else summary.failed).append(idx)

        log.info(
            f"generate_all done: {len(summary.succeeded)} drawn, {len(summary.failed)} failed "
            f"of {len(summary.attempted)}"
        )
        return summary

    # -------------------------------------------------------------------
    # Text helpers
    # -------------------------------------------------------------------

    def last_story_text(self) -> str:
        for page in reversed(self.pages):
            if page.type == PageType.STORY:
                return page.text
        return ""

    def summary(self) -> str:
        return ". ".join(p.text for p in self.pages if p.text)
