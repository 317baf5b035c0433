# app/features/story_script/service.py
from app.features.pages.service import PageCollection
from app.features.project.service import StudioSession
from app.logger import get_logger
from app.schemas import Step
from .schemas import IdeaRequest

log = get_logger(__name__)


async def spark_story(session: StudioSession, req: IdeaRequest) -> None:
    """
    Idea step: turn an idea (or a photo) into a script and move on to the
    character step. On GenerationError the project is left as it was.
    """
    session.require_step(Step.IDEA)
    if req.image:
        script = await session.gateway.generate_script_from_image(req.image, req.template)
        idea = script.extracted_idea or ""
    else:
        script = await session.gateway.generate_script(req.idea.strip(), req.template)
        idea = req.idea.strip()

    pages = PageCollection.from_script(script.pages).pages
    log.info(f"script '{script.title}' generated with {len(pages)} pages")
    session.advance(
        Step.CHARACTER,
        original_idea=idea,
        template=req.template,
        title=script.title,
        pages=pages,
    )
