# app/schemas.py
import time
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return uuid.uuid4().hex[:9]


def now_ms() -> int:
    return int(time.time() * 1000)


class StoryTemplate(str, Enum):
    HERO_JOURNEY = "Hero's Journey"
    SEARCH_AND_FIND = "Search & Find"
    BEDTIME_HEALING = "Bedtime Healing"
    WACKY_ADVENTURE = "Wacky Adventure"


class VisualStyle(str, Enum):
    WATERCOLOR = "Soft Watercolor"
    CRAYON = "Hand-drawn Crayon"
    PIXAR_3D = "Modern 3D Animation"
    PAPER_CUT = "Paper-cut Collage"
    OIL_PAINTING = "Classic Oil Painting"
    GHIBLI = "Ghibli Studio Anime"
    SHAUN_TAN = "Shaun Tan Surrealism"


class PageType(str, Enum):
    COVER = "cover"
    STORY = "story"
    BACK = "back"


class Step(str, Enum):
    IDEA = "idea"
    CHARACTER = "character"
    DIRECTOR = "director"
    PRESS = "press"


STEPS: List[Step] = [Step.IDEA, Step.CHARACTER, Step.DIRECTOR, Step.PRESS]


class CamelModel(BaseModel):
    # persisted blob and API payloads use the camelCase layout
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(CamelModel):
    id: str = Field(default_factory=new_id)
    type: PageType = PageType.STORY
    page_number: int = Field(1, ge=1)
    text: str = ""
    visual_prompt: str = ""
    image_url: Optional[str] = None
    is_generating: bool = False


class Project(CamelModel):
    id: str = Field(default_factory=new_id)
    title: str = ""
    original_idea: str = ""
    template: StoryTemplate = StoryTemplate.HERO_JOURNEY
    pages: List[Page] = Field(default_factory=list)
    character_description: str = ""
    character_reference_image: Optional[str] = None
    character_seed_image: Optional[str] = None
    visual_style: VisualStyle = VisualStyle.WATERCOLOR
    current_step: Step = Step.IDEA
    created_at: int = Field(default_factory=now_ms)


class ScriptPage(CamelModel):
    type: PageType = PageType.STORY
    text: str = ""
    visual_prompt: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _lenient_type(cls, v):
        # models sometimes answer "Cover" or "page"; anything unknown is a story page
        v = str(getattr(v, "value", v) or "").strip().lower()
        return v if v in {t.value for t in PageType} else PageType.STORY.value


class ScriptResult(CamelModel):
    title: str
    pages: List[ScriptPage] = Field(default_factory=list)
    extracted_idea: Optional[str] = None


class PageSuggestion(CamelModel):
    text: str = ""
    visual_prompt: str = ""
