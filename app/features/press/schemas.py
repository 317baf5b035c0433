# app/features/press/schemas.py
from typing import Literal, Optional
from app.schemas import CamelModel, Page


class SpreadLayout(CamelModel):
    kind: Literal["cover", "spread", "back"]
    index: int
    left: int
    right: Optional[int] = None   # None on a spread means the "end" placeholder slot


class SpreadView(CamelModel):
    layout: SpreadLayout
    page_count: int
    left: Page
    right: Optional[Page] = None
    right_placeholder: bool = False
    can_prev: bool
    can_next: bool


class GotoRequest(CamelModel):
    index: int
