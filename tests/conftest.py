# tests/conftest.py
import asyncio
import os
import tempfile

# keep generated files (library.json, PDFs, videos) out of the source tree
os.environ.setdefault("OUTPUT_DIR", tempfile.mkdtemp(prefix="storybook_test_"))

import pytest
from fastapi.testclient import TestClient

from app.errors import GenerationError
from app.features.library.service import LibraryStore
from app.features.project.service import StudioSession, get_session
from app.lib.gateway import GenerationGateway
from app.lib.storage import JsonStorage
from app.main import app
from app.schemas import Page, PageSuggestion, PageType, ScriptPage, ScriptResult


# -------- Utilities --------
TINY_PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGNg"
    "YAAAAAMAASsJTYQAAAAASUVORK5CYII="
)
TINY_PNG_DATA_URL = f"data:image/png;base64,{TINY_PNG_B64}"


def make_pages(story_count: int, *, with_back: bool = True, with_cover: bool = True):
    pages = []
    if with_cover:
        pages.append(Page(type=PageType.COVER, text="Cover", visual_prompt="cover art"))
    for i in range(story_count):
        pages.append(Page(type=PageType.STORY, text=f"Story {i + 1}", visual_prompt=f"scene {i + 1}"))
    if with_back:
        pages.append(Page(type=PageType.BACK, text="The End", visual_prompt="back art"))
    for i, p in enumerate(pages):
        p.page_number = i + 1
    return pages


# -------- Fake provider --------
class FakeGateway(GenerationGateway):
    """
    In-memory provider. Records every scene call as ("start", text) /
    ("end", text) events so tests can check ordering and overlap.
    """

    def __init__(self):
        self.events = []
        self.scene_calls = []
        self.fail_texts = set()
        self.fail_everything = False
        self.delay = 0.0
        self.suggestion = PageSuggestion(text="The fox finds a key.", visual_prompt="A fox holding a key")
        self.suggestion_fails = False
        self.script = ScriptResult(
            title="The Brave Penguin",
            pages=[
                ScriptPage(type=PageType.COVER, text="The Brave Penguin", visual_prompt="penguin on ice"),
                ScriptPage(type=PageType.STORY, text="Pip wants to fly.", visual_prompt="penguin looking up"),
                ScriptPage(type=PageType.STORY, text="Pip builds wings.", visual_prompt="penguin with wings"),
                ScriptPage(type=PageType.STORY, text="Pip soars.", visual_prompt="penguin in the sky"),
                ScriptPage(type=PageType.BACK, text="Goodnight, Pip.", visual_prompt="penguin asleep"),
            ],
        )
        self.video_calls = 0

    def _maybe_fail(self, what):
        if self.fail_everything:
            raise GenerationError(f"{what} failed: provider is down")

    async def generate_script(self, idea, template):
        self._maybe_fail("story script")
        return self.script.model_copy(deep=True)

    async def generate_script_from_image(self, image, template):
        self._maybe_fail("story script from image")
        result = self.script.model_copy(deep=True)
        result.extracted_idea = "A penguin who wants to fly"
        return result

    async def generate_character_options(self, description, style, reference_image=None):
        self._maybe_fail("character design")
        return [TINY_PNG_DATA_URL, TINY_PNG_DATA_URL]

    async def generate_scene_image(self, page_text, visual_prompt, character_seed_image, style):
        self.scene_calls.append((page_text, visual_prompt, character_seed_image, style))
        self.events.append(("start", page_text))
        await asyncio.sleep(self.delay)
        self.events.append(("end", page_text))
        self._maybe_fail("scene illustration")
        if page_text in self.fail_texts:
            raise GenerationError(f"scene illustration failed for {page_text!r}")
        return TINY_PNG_DATA_URL

    async def generate_next_page_suggestion(self, context, last_page_text):
        if self.suggestion_fails:
            raise GenerationError("next page suggestion failed")
        return self.suggestion

    async def generate_video(self, title, summary, on_progress):
        self.video_calls += 1
        on_progress("Drawing movie frames...")
        await asyncio.sleep(self.delay)
        self._maybe_fail("trailer video")
        return "/tmp/trailer.mp4"


# -------- Fixtures --------
@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(tmp_path / "library.json", quota_bytes=5 * 1024 * 1024)


@pytest.fixture
def library(storage):
    store = LibraryStore(storage)
    store.load()
    return store


@pytest.fixture
def session(library, gateway):
    return StudioSession(library=library, gateway=gateway)


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.pop(get_session, None)


# -------- Mocks for OpenAI --------
class _MockImageData:
    def __init__(self, b64_json):
        self.b64_json = b64_json


class _MockImagesResponse:
    def __init__(self, b64_list):
        self.data = [_MockImageData(b) for b in b64_list]


class _MockMessage:
    def __init__(self, content: str):
        self.content = content


class _MockChoice:
    def __init__(self, content: str):
        self.message = _MockMessage(content)


class _MockChatResponse:
    def __init__(self, content: str):
        self.choices = [_MockChoice(content)]


class _MockVideo:
    def __init__(self, id, status, progress=None, error=None):
        self.id = id
        self.status = status
        self.progress = progress
        self.error = error


class _MockVideoContent:
    def __init__(self, data: bytes):
        self.data = data

    def write_to_file(self, file):
        with open(file, "wb") as f:
            f.write(self.data)


class FakeOpenAIClient:
    """
    Stands in for openai.OpenAI. Chat replies and image payloads are queued
    by the test; every call is recorded as (endpoint, kwargs).
    """

    def __init__(self):
        self.calls = []
        self.chat_replies = []
        self.image_b64 = [TINY_PNG_B64]
        self.video_statuses = ["in_progress", "completed"]

        outer = self

        class _Completions:
            def create(self, **kwargs):
                outer.calls.append(("chat", kwargs))
                return _MockChatResponse(outer.chat_replies.pop(0))

        class _Chat:
            completions = _Completions()

        class _Images:
            def generate(self, **kwargs):
                outer.calls.append(("images.generate", kwargs))
                return _MockImagesResponse(outer.image_b64)

            def edit(self, **kwargs):
                outer.calls.append(("images.edit", kwargs))
                return _MockImagesResponse(outer.image_b64)

        class _Videos:
            def create(self, **kwargs):
                outer.calls.append(("videos.create", kwargs))
                return _MockVideo("video_1", outer.video_statuses.pop(0), progress=0)

            def retrieve(self, video_id):
                outer.calls.append(("videos.retrieve", {"video_id": video_id}))
                status = outer.video_statuses.pop(0)
                return _MockVideo(video_id, status, progress=100 if status == "completed" else 50)

            def download_content(self, video_id):
                outer.calls.append(("videos.download_content", {"video_id": video_id}))
                return _MockVideoContent(b"\x00\x00\x00\x18ftypmp42")

        self.chat = _Chat()
        self.images = _Images()
        self.videos = _Videos()

    def endpoints(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def openai_fake():
    return FakeOpenAIClient()
