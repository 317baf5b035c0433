# app/features/character/service.py
from typing import List

from app.features.project.service import StudioSession
from app.logger import get_logger
from app.schemas import Step
from .schemas import CharacterOptionsRequest, CharacterSelectRequest

log = get_logger(__name__)


async def design_character(session: StudioSession, req: CharacterOptionsRequest) -> List[str]:
    session.require_step(Step.CHARACTER)
    options = await session.gateway.generate_character_options(
        req.description.strip(), req.style, req.reference_image
    )
    log.info(f"project {session.project.id}: {len(options)} character options")
    return options


def lock_character(session: StudioSession, req: CharacterSelectRequest) -> None:
    """Store the chosen seed image and move on to directing the scenes."""
    session.require_step(Step.CHARACTER)
    session.advance(
        Step.DIRECTOR,
        character_description=req.description.strip(),
        character_reference_image=req.reference_image,
        character_seed_image=req.seed_image,
        visual_style=req.style,
    )
