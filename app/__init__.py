# app/__init__.py
from .config import config, make_job_dir
from .logger import get_logger
from .errors import (
    StudioError,
    GenerationError,
    StructuralViolation,
    IllegalTransition,
    StorageCapacityExceeded,
    MalformedPersistedState,
)
from .schemas import Page, PageType, Project, Step, StoryTemplate, VisualStyle
from .main import app


__all__ = ["app",
           "config",
           "make_job_dir",
           "get_logger",
           "StudioError",
           "GenerationError",
           "StructuralViolation",
           "IllegalTransition",
           "StorageCapacityExceeded",
           "MalformedPersistedState",
           "Page",
           "PageType",
           "Project",
           "Step",
           "StoryTemplate",
           "VisualStyle",
           ]
