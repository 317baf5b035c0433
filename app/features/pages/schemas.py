# app/features/pages/schemas.py
from typing import List, Optional
from pydantic import Field

from app.schemas import CamelModel, Page, VisualStyle


class GenerationSummary(CamelModel):
    attempted: List[int] = Field(default_factory=list, description="Indices sent to the provider, in order")
    succeeded: List[int] = Field(default_factory=list)
    failed: List[int] = Field(default_factory=list)


class PageTextUpdate(CamelModel):
    text: str


class GenerateAllRequest(CamelModel):
    clear_existing: bool = False


class StyleUpdate(CamelModel):
    style: VisualStyle


class PageResponse(CamelModel):
    page: Page
    pages: List[Page]
    notice: Optional[str] = None
    storage_warning: Optional[str] = None


class GenerateAllResponse(CamelModel):
    summary: GenerationSummary
    pages: List[Page]
    storage_warning: Optional[str] = None
