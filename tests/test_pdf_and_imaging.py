# tests/test_pdf_and_imaging.py
import base64
import os

import pytest

from app.lib.imaging import as_upload, is_data_url, open_image, parse_data_url, to_data_url
from app.lib.pdf import make_book_pdf
from tests.conftest import TINY_PNG_B64, TINY_PNG_DATA_URL, make_pages


def test_parse_data_url_and_raw_base64():
    mime, data = parse_data_url(TINY_PNG_DATA_URL)
    assert mime == "image/png"
    assert data == base64.b64decode(TINY_PNG_B64)

    mime, raw = parse_data_url(TINY_PNG_B64)
    assert mime == "image/png"
    assert raw == data

    with pytest.raises(ValueError):
        parse_data_url("")


def test_to_data_url_round_trips_bytes():
    _, data = parse_data_url(TINY_PNG_DATA_URL)
    assert to_data_url(data) == TINY_PNG_DATA_URL
    assert is_data_url(to_data_url(TINY_PNG_B64, "image/jpeg"))
    assert not is_data_url(TINY_PNG_B64)


def test_as_upload_picks_extension_from_mime():
    name, data, mime = as_upload(TINY_PNG_B64, "character")
    assert (name, mime) == ("character.png", "image/png")
    assert open_image(TINY_PNG_DATA_URL).size == (1, 1)


def test_make_book_pdf_with_and_without_images(tmp_path):
    pages = make_pages(2)
    pages[0].image_url = TINY_PNG_DATA_URL
    pages[1].image_url = "data:image/png;base64,bm90IGFuIGltYWdl"  # unreadable, text only
    out = os.path.join(tmp_path, "book.pdf")

    path = make_book_pdf(pages, pdf_name=out, title="The Brave Penguin")

    assert path == out
    with open(out, "rb") as f:
        content = f.read()
    assert content.startswith(b"%PDF")
    assert len(content) > 500
