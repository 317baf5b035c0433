# app/features/story_script/schemas.py
from typing import Optional
from pydantic import Field, model_validator

from app.schemas import CamelModel, StoryTemplate


class IdeaRequest(CamelModel):
    idea: str = ""
    image: Optional[str] = Field(None, description="Optional photo as a data URL; takes precedence over the idea text")
    template: StoryTemplate = StoryTemplate.HERO_JOURNEY

    @model_validator(mode="after")
    def _needs_idea_or_image(self):
        if not self.idea.strip() and not self.image:
            raise ValueError("describe an idea or upload a picture")
        return self
