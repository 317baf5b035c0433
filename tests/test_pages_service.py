# tests/test_pages_service.py
import asyncio

import pytest

from app.errors import StructuralViolation
from app.features.pages.service import DEFAULT_PAGE_TEXT, DEFAULT_VISUAL_PROMPT, PageCollection
from app.schemas import PageSuggestion, PageType, ScriptPage, VisualStyle
from tests.conftest import TINY_PNG_DATA_URL, make_pages

SEED = TINY_PNG_DATA_URL
STYLE = VisualStyle.WATERCOLOR


def _numbers(pages):
    return [p.page_number for p in pages]


def _types(pages):
    return [p.type for p in pages]


# --------------------
# structure
# --------------------

def test_from_script_forces_cover_first_and_back_last():
    script = [
        ScriptPage(type="story", text="a"),
        ScriptPage(type="back", text="z"),
        ScriptPage(type="cover", text="c"),
        ScriptPage(type="story", text="b"),
        ScriptPage(type="cover", text="c2"),
        ScriptPage(type="back", text="z2"),
    ]
    pages = PageCollection.from_script(script)

    assert [p.text for p in pages] == ["c", "a", "z", "b", "c2", "z2"]
    assert _types(pages) == [PageType.COVER] + [PageType.STORY] * 4 + [PageType.BACK]
    assert _numbers(pages) == [1, 2, 3, 4, 5, 6]
    assert len({p.id for p in pages}) == 6


def test_script_page_type_is_lenient():
    assert ScriptPage(type="Cover").type == PageType.COVER
    assert ScriptPage(type="interior").type == PageType.STORY


def test_insert_goes_before_back_and_renumbers():
    pages = PageCollection(make_pages(2))
    page = pages.insert_story_page(PageSuggestion(text="New page", visual_prompt="A new scene"))

    assert [p.text for p in pages] == ["Cover", "Story 1", "Story 2", "New page", "The End"]
    assert pages[3].id == page.id
    assert page.page_number == 4
    assert _numbers(pages) == [1, 2, 3, 4, 5]


def test_insert_without_back_appends():
    pages = PageCollection(make_pages(1, with_back=False))
    pages.insert_story_page(PageSuggestion(text="Tail"))
    assert pages[len(pages) - 1].text == "Tail"
    assert _numbers(pages) == [1, 2, 3]


def test_insert_blank_suggestion_uses_defaults():
    pages = PageCollection(make_pages(1))
    page = pages.insert_story_page(PageSuggestion(text="  ", visual_prompt=""))
    assert page.text == DEFAULT_PAGE_TEXT
    assert page.visual_prompt == DEFAULT_VISUAL_PROMPT
    assert page.type == PageType.STORY


def test_delete_story_page_renumbers():
    pages = PageCollection(make_pages(3))
    removed = pages.delete_page(2)
    assert removed.text == "Story 2"
    assert [p.text for p in pages] == ["Cover", "Story 1", "Story 3", "The End"]
    assert _numbers(pages) == [1, 2, 3, 4]


@pytest.mark.parametrize("index", [0, 4])
def test_delete_cover_or_back_is_refused_and_changes_nothing(index):
    pages = PageCollection(make_pages(3))
    before = [p.model_copy() for p in pages]

    with pytest.raises(StructuralViolation):
        pages.delete_page(index)

    assert [p.model_dump() for p in pages] == [p.model_dump() for p in before]


def test_delete_out_of_range_is_a_structural_violation():
    pages = PageCollection(make_pages(1))
    with pytest.raises(StructuralViolation):
        pages.delete_page(7)


def test_update_text_keeps_everything_else():
    pages = PageCollection(make_pages(2))
    original = pages[1]
    updated = pages.update_page_text(1, "Rewritten")
    assert updated.text == "Rewritten"
    assert updated.id == original.id
    assert updated.visual_prompt == original.visual_prompt
    assert pages[1].text == "Rewritten"


def test_collection_mutates_the_wrapped_list():
    raw = make_pages(2)
    PageCollection(raw).insert_story_page()
    assert len(raw) == 5


# --------------------
# illustration
# --------------------

@pytest.mark.asyncio
async def test_regenerate_success_sets_image_and_clears_flag(gateway):
    pages = PageCollection(make_pages(2))
    ok = await pages.regenerate_image(1, gateway, SEED, STYLE)

    assert ok is True
    assert pages[1].image_url == TINY_PNG_DATA_URL
    assert pages[1].is_generating is False
    assert gateway.scene_calls == [("Story 1", "scene 1", SEED, STYLE)]


@pytest.mark.asyncio
async def test_regenerate_failure_only_clears_flag(gateway):
    pages = PageCollection(make_pages(2))
    pages[1].image_url = "data:image/png;base64,old"
    gateway.fail_texts.add("Story 1")

    ok = await pages.regenerate_image(1, gateway, SEED, STYLE)

    assert ok is False
    assert pages[1].image_url is None
    assert pages[1].is_generating is False


@pytest.mark.asyncio
async def test_page_is_marked_generating_while_in_flight(gateway):
    pages = PageCollection(make_pages(2))
    gateway.delay = 0.05
    task = asyncio.create_task(pages.regenerate_image(2, gateway, SEED, STYLE))
    await asyncio.sleep(0.01)

    assert pages[2].is_generating is True
    assert pages[2].image_url is None

    await task
    assert pages[2].is_generating is False


@pytest.mark.asyncio
async def test_regenerate_result_follows_the_page_when_indices_shift(gateway):
    pages = PageCollection(make_pages(3))
    target_id = pages[2].id
    gateway.delay = 0.05
    task = asyncio.create_task(pages.regenerate_image(2, gateway, SEED, STYLE))
    await asyncio.sleep(0.01)

    pages.delete_page(1)
    assert await task is True

    assert pages[1].id == target_id
    assert pages[1].image_url == TINY_PNG_DATA_URL
    assert all(p.image_url is None for p in pages if p.id != target_id)


@pytest.mark.asyncio
async def test_regenerate_result_is_dropped_when_the_page_was_deleted(gateway):
    pages = PageCollection(make_pages(3))
    gateway.delay = 0.05
    task = asyncio.create_task(pages.regenerate_image(2, gateway, SEED, STYLE))
    await asyncio.sleep(0.01)

    pages.delete_page(2)
    assert await task is False
    assert len(pages) == 4
    assert all(p.image_url is None for p in pages)


@pytest.mark.asyncio
async def test_generate_all_runs_one_page_at_a_time_in_order(gateway):
    pages = PageCollection(make_pages(3))
    gateway.delay = 0.01

    summary = await pages.generate_all(True, gateway, SEED, STYLE)

    texts = ["Cover", "Story 1", "Story 2", "Story 3", "The End"]
    expected = []
    for t in texts:
        expected += [("start", t), ("end", t)]
    assert gateway.events == expected
    assert summary.attempted == [0, 1, 2, 3, 4]
    assert summary.succeeded == [0, 1, 2, 3, 4]
    assert all(p.image_url == TINY_PNG_DATA_URL for p in pages)


@pytest.mark.asyncio
async def test_generate_all_clear_existing_redraws_everything(gateway):
    pages = PageCollection(make_pages(2))
    pages[1].image_url = "data:image/png;base64,old"

    summary = await pages.generate_all(True, gateway, SEED, STYLE)

    assert len(gateway.scene_calls) == 4
    assert summary.attempted == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_generate_all_fill_missing_skips_illustrated_pages(gateway):
    pages = PageCollection(make_pages(2))
    pages[1].image_url = "data:image/png;base64,old"

    summary = await pages.generate_all(False, gateway, SEED, STYLE)

    assert summary.attempted == [0, 2, 3]
    assert pages[1].image_url == "data:image/png;base64,old"
    assert [c[0] for c in gateway.scene_calls] == ["Cover", "Story 2", "The End"]


@pytest.mark.asyncio
async def test_generate_all_keeps_going_after_a_failure(gateway):
    pages = PageCollection(make_pages(3))
    gateway.fail_texts.add("Story 2")

    summary = await pages.generate_all(False, gateway, SEED, STYLE)

    assert summary.failed == [2]
    assert summary.succeeded == [0, 1, 3, 4]
    assert pages[2].image_url is None
    assert not any(p.is_generating for p in pages)


def test_text_helpers():
    pages = PageCollection(make_pages(2))
    assert pages.last_story_text() == "Story 2"
    assert pages.summary() == "Cover. Story 1. Story 2. The End"
    assert PageCollection([]).last_story_text() == ""
