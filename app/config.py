# app/config.py
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

def _env_csv(name: str, default: str = "*") -> List[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]

@dataclass(frozen=True)
class Config:
    # OpenAI
    openai_api_key: str
    openai_text_model: str
    openai_image_model: str
    openai_video_model: str
    scene_image_size: str      # valid: 1024x1024, 1024x1536, 1536x1024, auto
    character_image_size: str
    character_options: int    # candidate sheets per character request
    video_poll_seconds: float
    # API / CORS
    allowed_origins: List[str]
    # Output handling
    keep_outputs: bool
    base_output_dir: Path
    # Library persistence
    library_path: Path
    storage_quota_bytes: int   # mirrors the browser's ~5 MiB localStorage budget
    # Logging
    log_level: str

def load_config() -> Config:
    base_output_dir = Path(os.getenv("OUTPUT_DIR", str(Path(__file__).resolve().parent / "output")))
    return Config(
        openai_api_key = os.getenv("OPENAI_API_KEY", ""),
        openai_text_model = os.getenv("OPENAI_TEXT_MODEL", "gpt-4o-mini"),
        openai_image_model = os.getenv("OPENAI_IMAGE_MODEL", "gpt-image-1"),
        openai_video_model = os.getenv("OPENAI_VIDEO_MODEL", "sora-2"),
        scene_image_size = os.getenv("SCENE_IMAGE_SIZE", "1536x1024"),
        character_image_size = os.getenv("CHARACTER_IMAGE_SIZE", "1024x1024"),
        character_options = int(os.getenv("CHARACTER_OPTIONS", "2")),
        video_poll_seconds = float(os.getenv("VIDEO_POLL_SECONDS", "10")),
        allowed_origins = _env_csv("ALLOWED_ORIGINS", "*"),
        keep_outputs = _env_bool("KEEP_OUTPUTS", False),
        base_output_dir = base_output_dir,
        library_path = Path(os.getenv("LIBRARY_PATH", str(base_output_dir / "library.json"))),
        storage_quota_bytes = int(os.getenv("STORAGE_QUOTA_BYTES", str(5 * 1024 * 1024))),
        log_level = os.getenv("LOG_LEVEL", "INFO"),
    )

# Load once and ensure output directory exists
config = load_config()
config.base_output_dir.mkdir(parents=True, exist_ok=True)

def make_job_dir(prefix: str = "job_") -> Path:
    """
    Create a unique working directory under base_output_dir for a single export/download.
    Returns the Path to that directory.
    """
    path_str = tempfile.mkdtemp(prefix=prefix, dir=str(config.base_output_dir))
    return Path(path_str)
