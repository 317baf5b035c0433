# app/features/library/schemas.py
from typing import List, Optional
from app.schemas import CamelModel, Project, Step


class SaveResult(CamelModel):
    persisted: bool
    warning: Optional[str] = None


class LibraryEntry(CamelModel):
    """Shelf card: enough to list a book without shipping every page image."""
    id: str
    title: str
    cover_image_url: Optional[str] = None
    page_count: int
    current_step: Step
    created_at: int


class LibraryResponse(CamelModel):
    books: List[LibraryEntry]


class OpenBookRequest(CamelModel):
    step: Optional[Step] = Step.PRESS
