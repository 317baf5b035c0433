# app/features/character/schemas.py
from typing import List, Optional
from pydantic import Field, model_validator

from app.schemas import CamelModel, VisualStyle


class CharacterOptionsRequest(CamelModel):
    description: str = ""
    style: VisualStyle = VisualStyle.WATERCOLOR
    reference_image: Optional[str] = Field(None, description="Optional PNG/JPEG data URL to base the design on")

    @model_validator(mode="after")
    def _needs_description_or_reference(self):
        if not self.description.strip() and not self.reference_image:
            raise ValueError("describe the character or upload a reference picture")
        return self


class CharacterOptionsResponse(CamelModel):
    options: List[str]


class CharacterSelectRequest(CamelModel):
    seed_image: Optional[str] = Field(None, description="The chosen design; locks the character's look")
    description: str = ""
    style: VisualStyle = VisualStyle.WATERCOLOR
    reference_image: Optional[str] = None
