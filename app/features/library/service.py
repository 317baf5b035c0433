# app/features/library/service.py
from __future__ import annotations

from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from app.errors import MalformedPersistedState, StorageCapacityExceeded, StudioError
from app.features.library.schemas import LibraryEntry, SaveResult
from app.lib.storage import JsonStorage
from app.logger import get_logger
from app.schemas import Project, now_ms

log = get_logger(__name__)

STORAGE_KEY = "dreamweaver_history"

_projects = TypeAdapter(List[Project])


class LibraryStore:
    """
    Saved books, unique by id, persisted as one blob under STORAGE_KEY.
    Entries are deep copies: editing the active project never touches a
    saved book until the next upsert. Persistence is best effort; the
    in-memory library is the source of truth for the running process.
    """

    def __init__(self, storage: JsonStorage):
        self.storage = storage
        self._books: List[Project] = []

    def __len__(self) -> int:
        return len(self._books)

    def load(self) -> List[Project]:
        try:
            blob = self.storage.get_item(STORAGE_KEY)
            books = _projects.validate_json(blob) if blob else []
        except (MalformedPersistedState, ValidationError, ValueError) as e:
            log.error(f"failed to load library, starting empty: {e}")
            books = []

        deduped: dict[str, Project] = {}
        for book in books:
            deduped[book.id] = book
        self._books = list(deduped.values())
        log.info(f"library loaded with {len(self._books)} books")
        return self.list()

    def _persist(self) -> None:
        blob = _projects.dump_json(self._books, by_alias=True).decode("utf-8")
        self.storage.set_item(STORAGE_KEY, blob)

    def upsert(self, project: Project) -> SaveResult:
        """
        Replace the entry with the same id (keeping its original created_at)
        or append a copy stamped now. Storage failures are reported, never raised.
        """
        for i, book in enumerate(self._books):
            if book.id == project.id:
                self._books[i] = project.model_copy(update={"created_at": book.created_at}, deep=True)
                break
        else:
            self._books.append(project.model_copy(update={"created_at": now_ms()}, deep=True))

        try:
            self._persist()
        except StorageCapacityExceeded as e:
            warning = "The book is too large to save to the library, but the current preview is not affected."
            log.warning(f"{warning} ({e})")
            return SaveResult(persisted=False, warning=warning)
        except StudioError as e:
            warning = "The book could not be saved to the library, but the current preview is not affected."
            log.warning(f"{warning} ({e})")
            return SaveResult(persisted=False, warning=warning)
        return SaveResult(persisted=True)

    def remove(self, project_id: str) -> bool:
        before = len(self._books)
        self._books = [b for b in self._books if b.id != project_id]
        try:
            self._persist()
        except StudioError as e:
            # deleting frees space; a failing write must not block it
            log.warning(f"library persistence after delete failed: {e}")
        return len(self._books) < before

    def get(self, project_id: str) -> Optional[Project]:
        for book in self._books:
            if book.id == project_id:
                return book.model_copy(deep=True)
        return None

    def list(self) -> List[Project]:
        """Newest first."""
        return [b.model_copy(deep=True) for b in sorted(self._books, key=lambda b: b.created_at, reverse=True)]

    def entries(self) -> List[LibraryEntry]:
        return [
            LibraryEntry(
                id=b.id,
                title=b.title,
                cover_image_url=b.pages[0].image_url if b.pages else None,
                page_count=len(b.pages),
                current_step=b.current_step,
                created_at=b.created_at,
            )
            for b in sorted(self._books, key=lambda b: b.created_at, reverse=True)
        ]
