# app/features/pages/prompt.py
def build_scene_prompt(*, page_text: str, visual_prompt: str, style: str) -> str:
    return (
        "Illustration for a children's book.\n"
        f"Context: \"{page_text}\".\n"
        f"Scene details: \"{visual_prompt}\".\n"
        "The attached character MUST be the main hero; keep their face, colors and outfit unchanged.\n"
        f"Style: {style}. High detail. No text, captions or speech bubbles."
    )


def build_next_page_prompt(*, context: str, last_page_text: str) -> str:
    return f"""
Story background: "{context}".
Story so far ends with: "{last_page_text}".

Write the next page of this children's picture book.
Return one JSON object: {{"text": "page text for the reader", "visualPrompt": "English scene description"}}""".strip()
