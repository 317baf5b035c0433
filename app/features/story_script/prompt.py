# app/features/story_script/prompt.py

_PAGES_SCHEMA = """
  "pages": [
    {"type": "cover", "text": "Title and cover line", "visualPrompt": "English scene description"},
    {"type": "story", "text": "Short page text", "visualPrompt": "English scene description"},
    {"type": "back", "text": "Closing words", "visualPrompt": "English scene description"}
  ]""".strip("\n")


def build_script_prompt(*, idea: str, template: str) -> str:
    return f"""
Write the complete script for an illustrated children's picture book based on this idea: "{idea}".

**STRUCTURE:** follow the "{template}" story template.

**BOOK LAYOUT (MANDATORY):**
1. One eye-catching cover page (type "cover") with the book title and a cover line.
2. Six to eight story pages (type "story").
3. One warm back page (type "back") with closing words.

Every page needs a short text for the reader and a detailed visual prompt in English
describing the scene, lighting and what the main character is doing, so it can be illustrated later.

Return one JSON object:
{{
  "title": "Book title",
{_PAGES_SCHEMA}
}}""".strip()


def build_script_from_image_prompt(*, template: str) -> str:
    return f"""
Study the attached photo and turn it into a magical children's picture book.

**STRUCTURE:** follow the "{template}" story template.
Include a cover page (type "cover"), the story pages (type "story") and a back page (type "back").

Return one JSON object:
{{
  "title": "Book title",
  "extractedIdea": "One sentence describing the story idea found in the photo",
{_PAGES_SCHEMA}
}}""".strip()
