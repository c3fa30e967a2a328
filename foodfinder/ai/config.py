from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class AIConfig:
    api_key: str = os.getenv("GROQ_API_KEY", "")
    text_model: str = "llama-3.3-70b-versatile"
    vision_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    timeout: float = 30.0
    max_tokens: int = 1024
    nutrition_max_tokens: int = 1500
    enabled: bool = True


DEFAULT_AI_CONFIG = AIConfig()
