# app/features/video/prompt.py
def build_trailer_prompt(*, title: str, summary: str) -> str:
    return (
        f"Cinematic story movie trailer for \"{title}\". {summary} "
        "Animated style, smooth transitions, professional lighting."
    )
