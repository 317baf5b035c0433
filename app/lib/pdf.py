# app/lib/pdf.py
from typing import List
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from app import logger
from app.lib.imaging import open_image
from app.schemas import Page

log = logger.get_logger(__name__)

_MARGIN = 40
_FONT = "Helvetica"
_FONT_SIZE = 14
_LEADING = 18

def make_book_pdf(pages: List[Page], pdf_name: str = "book.pdf", title: str = "") -> str:
    """
    One A4 page per book page: the illustration scaled into the upper area,
    the page text wrapped and centered underneath. Pages without an image
    get their text only.
    """
    log.info(f"Combining {len(pages)} pages into PDF: {pdf_name}")
    c = canvas.Canvas(pdf_name, pagesize=A4)
    if title:
        c.setTitle(title)
    w, h = A4
    text_area = _LEADING * 6 + _MARGIN
    for page in pages:
        if page.image_url:
            try:
                img = open_image(page.image_url)
                box_w = w - 2 * _MARGIN
                box_h = h - text_area - 2 * _MARGIN
                img_ratio = img.width / img.height
                if box_w / box_h > img_ratio:
                    ih = box_h
                    iw = ih * img_ratio
                else:
                    iw = box_w
                    ih = iw / img_ratio
                x = (w - iw) / 2
                y = text_area + _MARGIN + (box_h - ih) / 2
                c.drawImage(ImageReader(img), x, y, iw, ih)
            except Exception as e:
                log.warning(f"skipping unreadable image on page {page.page_number}: {e}")

        c.setFont(_FONT, _FONT_SIZE)
        lines = simpleSplit(page.text or "", _FONT, _FONT_SIZE, w - 2 * _MARGIN)
        y = text_area
        for line in lines:
            c.drawCentredString(w / 2, y, line)
            y -= _LEADING
        c.setFont(_FONT, 9)
        c.drawCentredString(w / 2, _MARGIN / 2, str(page.page_number))
        c.showPage()
    c.save()
    return pdf_name
