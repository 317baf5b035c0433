# app/lib/gateway.py
from __future__ import annotations

import asyncio
import json
import os
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from openai import OpenAI
from pydantic import ValidationError

from app.config import config
from app.errors import GenerationError
from app.features.character.prompt import build_character_sheet_prompt
from app.features.pages.prompt import build_next_page_prompt, build_scene_prompt
from app.features.story_script.prompt import build_script_from_image_prompt, build_script_prompt
from app.features.video.prompt import build_trailer_prompt
from app.lib.imaging import as_upload, is_data_url, parse_data_url, to_data_url
from app.logger import get_logger
from app.schemas import PageSuggestion, ScriptResult, StoryTemplate, VisualStyle

log = get_logger(__name__)

ProgressCallback = Callable[[str], None]

DEFAULT_TITLE = "Untitled Story"
DEFAULT_IMAGE_TITLE = "A Story From a Picture"
DEFAULT_IMAGE_IDEA = "A story inspired by a picture"

SCRIPT_SYSTEM = (
    "You are a warm, imaginative children's book author and art director. "
    "Return STRICT JSON only: one object with 'title' and 'pages', each page having "
    "'type' (cover|story|back), 'text' and 'visualPrompt'. No extra text, no markdown."
)
SUGGESTION_SYSTEM = (
    "You continue children's picture books one page at a time. "
    "Return STRICT JSON only: one object with 'text' and 'visualPrompt'."
)

_VIDEO_DONE = {"completed", "failed", "cancelled"}
_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def _json_object(text: str) -> Any:
    """Parse a model reply that may be fenced or wrapped in prose."""
    s = _FENCE_RE.sub("", text.strip())
    try:
        return json.loads(s)
    except ValueError:
        m = re.search(r"\{.*\}", s, flags=re.DOTALL)
        if not m:
            raise
        return json.loads(m.group(0))


class GenerationGateway(ABC):
    """
    Content-generation contract the studio depends on. Every call is async and
    raises GenerationError with a readable cause on failure.
    """

    @abstractmethod
    async def generate_script(self, idea: str, template: StoryTemplate) -> ScriptResult:
        raise NotImplementedError

    @abstractmethod
    async def generate_script_from_image(self, image: str, template: StoryTemplate) -> ScriptResult:
        raise NotImplementedError

    @abstractmethod
    async def generate_character_options(
        self, description: str, style: VisualStyle, reference_image: Optional[str] = None
    ) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    async def generate_scene_image(
        self, page_text: str, visual_prompt: str, character_seed_image: str, style: VisualStyle
    ) -> str:
        raise NotImplementedError

    @abstractmethod
    async def generate_next_page_suggestion(self, context: str, last_page_text: str) -> PageSuggestion:
        raise NotImplementedError

    @abstractmethod
    async def generate_video(self, title: str, summary: str, on_progress: ProgressCallback) -> str:
        raise NotImplementedError


class OpenAIGateway(GenerationGateway):
    def __init__(self, client: Any = None, *, poll_seconds: Optional[float] = None, video_dir: Optional[str] = None):
        self._client = client
        self._poll_seconds = config.video_poll_seconds if poll_seconds is None else poll_seconds
        self._video_dir = video_dir or os.path.join(str(config.base_output_dir), "videos")

    @property
    def client(self) -> Any:
        if self._client is not None:
            return self._client
        if not config.openai_api_key:
            raise GenerationError("OPENAI_API_KEY is not configured")
        self._client = OpenAI(api_key=config.openai_api_key)
        return self._client

    async def _call(self, what: str, fn: Callable[..., Any], **kwargs: Any) -> Any:
        """Run a blocking SDK call off the event loop and normalise its failures."""
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except GenerationError:
            raise
        except Exception as e:
            log.error(f"{what} failed: {e}")
            raise GenerationError(f"{what} failed: {e}") from e

    async def _chat_json(self, what: str, system: str, user: Any, temperature: float) -> Dict[str, Any]:
        resp = await self._call(
            what,
            self.client.chat.completions.create,
            model=config.openai_text_model,
            temperature=temperature,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        )
        raw = (resp.choices[0].message.content or "").strip()
        if not raw:
            raise GenerationError(f"{what} returned an empty response")
        try:
            data = _json_object(raw)
        except ValueError as e:
            log.error(f"{what} returned invalid JSON: {raw[:200]}")
            raise GenerationError(f"{what} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise GenerationError(f"{what} returned {type(data).__name__} instead of an object")
        return data

    def _script(self, data: Dict[str, Any], default_title: str) -> ScriptResult:
        data["title"] = (data.get("title") or "").strip() or default_title
        data["pages"] = data.get("pages") or []
        try:
            return ScriptResult.model_validate(data)
        except ValidationError as e:
            raise GenerationError(f"story script failed validation: {e}") from e

    async def generate_script(self, idea: str, template: StoryTemplate) -> ScriptResult:
        prompt = build_script_prompt(idea=idea, template=template.value)
        data = await self._chat_json("story script", SCRIPT_SYSTEM, prompt, temperature=0.9)
        return self._script(data, DEFAULT_TITLE)

    async def generate_script_from_image(self, image: str, template: StoryTemplate) -> ScriptResult:
        if not is_data_url(image):
            mime, raw = parse_data_url(image)
            image = to_data_url(raw, mime)
        content = [
            {"type": "text", "text": build_script_from_image_prompt(template=template.value)},
            {"type": "image_url", "image_url": {"url": image}},
        ]
        data = await self._chat_json("story script from image", SCRIPT_SYSTEM, content, temperature=0.9)
        data["extractedIdea"] = (data.get("extractedIdea") or "").strip() or DEFAULT_IMAGE_IDEA
        return self._script(data, DEFAULT_IMAGE_TITLE)

    def _images_from(self, what: str, resp: Any) -> List[str]:
        images = [to_data_url(d.b64_json) for d in (getattr(resp, "data", None) or []) if getattr(d, "b64_json", None)]
        if not images:
            raise GenerationError(
                f"{what} returned no image; the description may have been blocked by the safety filter"
            )
        return images

    async def generate_character_options(
        self, description: str, style: VisualStyle, reference_image: Optional[str] = None
    ) -> List[str]:
        prompt = build_character_sheet_prompt(
            description=description, style=style.value, has_reference=bool(reference_image)
        )
        if reference_image:
            resp = await self._call(
                "character design",
                self.client.images.edit,
                model=config.openai_image_model,
                image=as_upload(reference_image, "reference"),
                prompt=prompt,
                size=config.character_image_size,
                n=config.character_options,
            )
        else:
            resp = await self._call(
                "character design",
                self.client.images.generate,
                model=config.openai_image_model,
                prompt=prompt,
                size=config.character_image_size,
                n=config.character_options,
            )
        return self._images_from("character design", resp)

    async def generate_scene_image(
        self, page_text: str, visual_prompt: str, character_seed_image: str, style: VisualStyle
    ) -> str:
        if not character_seed_image:
            raise GenerationError("scene illustration needs the character seed image")
        prompt = build_scene_prompt(page_text=page_text, visual_prompt=visual_prompt, style=style.value)
        resp = await self._call(
            "scene illustration",
            self.client.images.edit,
            model=config.openai_image_model,
            image=as_upload(character_seed_image, "character"),
            prompt=prompt,
            size=config.scene_image_size,
            n=1,
        )
        return self._images_from("scene illustration", resp)[0]

    async def generate_next_page_suggestion(self, context: str, last_page_text: str) -> PageSuggestion:
        prompt = build_next_page_prompt(context=context, last_page_text=last_page_text)
        data = await self._chat_json("next page suggestion", SUGGESTION_SYSTEM, prompt, temperature=0.8)
        return PageSuggestion(
            text=str(data.get("text") or ""),
            visual_prompt=str(data.get("visualPrompt") or data.get("visual_prompt") or ""),
        )

    async def generate_video(self, title: str, summary: str, on_progress: ProgressCallback) -> str:
        """
        Submit a trailer job, then poll at a fixed interval until the provider
        reports a terminal status. Cancelling the awaiting task stops the loop
        between polls. Returns the local path of the downloaded video.
        """
        on_progress("Starting the movie engine...")
        video = await self._call(
            "trailer video",
            self.client.videos.create,
            model=config.openai_video_model,
            prompt=build_trailer_prompt(title=title, summary=summary),
        )
        while getattr(video, "status", None) not in _VIDEO_DONE:
            progress = getattr(video, "progress", None)
            on_progress(
                f"Drawing movie frames ({progress}%)..." if progress is not None
                else "Drawing movie frames (this takes a while)..."
            )
            await asyncio.sleep(self._poll_seconds)
            video = await self._call("trailer video status", self.client.videos.retrieve, video_id=video.id)

        if video.status != "completed":
            err = getattr(video, "error", None)
            reason = getattr(err, "message", None) or video.status
            raise GenerationError(f"trailer video failed: {reason}")

        await self._call("trailer download", os.makedirs, name=self._video_dir, exist_ok=True)
        out_path = os.path.join(self._video_dir, f"{video.id}.mp4")
        content = await self._call("trailer download", self.client.videos.download_content, video_id=video.id)
        await self._call("trailer download", content.write_to_file, file=out_path)
        on_progress("Trailer ready.")
        return out_path
