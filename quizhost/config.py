"""
Configuration loader

Settings come from a YAML file (config/askai.yaml by default) with
credentials and service endpoints overridable from the environment / .env.
"""
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/askai.yaml"


class ClassificationPolicy(str, Enum):
    KEYWORD_PREFILTER = "keyword-prefilter"      # reject locally without a model call
    MODEL_SELF_CLASSIFY = "model-self-classify"  # always call the model, trust its refusal


class RejudgePolicy(str, Enum):
    REAPPLY = "reapply"   # overwrite verdict and re-apply the score rule
    IGNORE = "ignore"     # judging a completed turn is a no-op


class GeminiSettings(BaseModel):
    api_key: str = ""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"


class ElevenLabsSettings(BaseModel):
    api_key: str = ""
    voice_id: str = ""
    base_url: str = "https://api.elevenlabs.io"
    model_id: str = "eleven_flash_v2_5"
    output_format: str = "mp3_44100_128"


class Settings(BaseModel):
    """Application settings"""
    storage_dir: str = "data/storage"
    poll_interval_ms: int = 1500
    classification_policy: ClassificationPolicy = ClassificationPolicy.MODEL_SELF_CLASSIFY
    rejudge_policy: RejudgePolicy = RejudgePolicy.REAPPLY
    use_search_grounding: bool = True
    max_save_retries: int = 3
    request_timeout_seconds: int = 45
    tts_max_chars: int = 600
    gemini: GeminiSettings = GeminiSettings()
    elevenlabs: ElevenLabsSettings = ElevenLabsSettings()


# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "GEMINI_API_KEY": ("gemini", "api_key"),
    "GEMINI_BASE_URL": ("gemini", "base_url"),
    "GEMINI_MODEL": ("gemini", "model"),
    "ELEVENLABS_API_KEY": ("elevenlabs", "api_key"),
    "ELEVENLABS_VOICE_ID": ("elevenlabs", "voice_id"),
    "ELEVENLABS_BASE_URL": ("elevenlabs", "base_url"),
    "ELEVENLABS_MODEL_ID": ("elevenlabs", "model_id"),
    "ELEVENLABS_OUTPUT_FORMAT": ("elevenlabs", "output_format"),
    "ASKAI_STORAGE_DIR": (None, "storage_dir"),
}


def _apply_env(data: dict) -> dict:
    # API_KEY is the legacy name for the Gemini credential
    if not os.getenv("GEMINI_API_KEY", "").strip() and os.getenv("API_KEY", "").strip():
        data.setdefault("gemini", {})["api_key"] = os.environ["API_KEY"].strip()

    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = os.getenv(env_name, "").strip()
        if not value:
            continue
        if section is None:
            data[field] = value
        else:
            data.setdefault(section, {})[field] = value
    return data


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file and environment

    Args:
        config_path: Path to config file (default: $ASKAI_CONFIG or config/askai.yaml)

    Returns:
        Settings object. A missing config file means built-in defaults.
    """
    load_dotenv()
    path = Path(config_path or os.getenv("ASKAI_CONFIG") or DEFAULT_CONFIG_PATH)

    data = {}
    if path.exists():
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info(f"⚙️ Config file {path} not found, using defaults")

    settings = Settings(**_apply_env(data))

    if not settings.gemini.api_key:
        logger.warning("⚠️ GEMINI_API_KEY not set: AI answers and transcription degrade to fallbacks")
    if not (settings.elevenlabs.api_key and settings.elevenlabs.voice_id):
        logger.warning("⚠️ ElevenLabs credentials not set: speech synthesis disabled")

    return settings
