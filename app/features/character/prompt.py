# app/features/character/prompt.py
def build_character_sheet_prompt(*, description: str, style: str, has_reference: bool) -> str:
    reference_line = (
        "Use the attached image as the reference for the character's look.\n"
        if has_reference else ""
    )
    return (
        "Character design sheet for a children's book.\n"
        f"{reference_line}"
        f"Description: {description or 'the character shown in the reference image'}.\n"
        "Clear character focus. White background.\n"
        f"Style: {style}. High consistency, vibrant colors, no text on image."
    )
