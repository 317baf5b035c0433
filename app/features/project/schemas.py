# app/features/project/schemas.py
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from app.schemas import CamelModel, Project, Step, StoryTemplate, VisualStyle


class View(str, Enum):
    STUDIO = "studio"
    LIBRARY = "library"


class StudioState(CamelModel):
    view: View
    project: Project
    storage_warning: Optional[str] = None


class ProjectPatch(CamelModel):
    """Fields a view may merge into the active project."""
    title: Optional[str] = None
    original_idea: Optional[str] = None
    template: Optional[StoryTemplate] = None
    character_description: Optional[str] = None
    character_reference_image: Optional[str] = None
    character_seed_image: Optional[str] = None
    visual_style: Optional[VisualStyle] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class AdvanceRequest(CamelModel):
    step: Step
    patch: ProjectPatch = Field(default_factory=ProjectPatch)


class ViewRequest(CamelModel):
    view: View
