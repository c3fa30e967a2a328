from __future__ import annotations

import base64
import json
import logging
import re
from typing import Any

from groq import Groq

from ..matching.models import AnalyzedDish
from .config import DEFAULT_AI_CONFIG, AIConfig

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

DISH_JSON_FORMAT = """\
{
  "name": "name of the dish",
  "cuisine": "type of cuisine (e.g., Italian, Chinese, Mexican)",
  "description": "short description of the dish",
  "ingredients": ["ingredient1", "ingredient2", "ingredient3"],
  "estimatedCalories": 0,
  "dietaryInfo": ["vegetarian", "vegan", "gluten-free"],
  "confidence": 0
}

estimatedCalories is a reasonable per-serving estimate. dietaryInfo is an \
empty list if none apply. confidence is a number between 0 and 100 saying \
how sure you are of the identification.
Respond ONLY with the JSON object, no additional text."""

IMAGE_PROMPT = (
    "Analyze this food image and describe the dish and its appearance "
    "in this JSON format:\n" + DISH_JSON_FORMAT
)

NUTRITION_JSON_FORMAT = """\
{
  "dishName": "%s",
  "servingSize": "typical serving size (e.g., 1 cup, 200g)",
  "calories": 0,
  "macronutrients": {"protein": "Xg", "carbohydrates": "Xg", "fat": "Xg", "fiber": "Xg"},
  "vitamins": ["vitamin A", "vitamin C"],
  "minerals": ["iron", "calcium"],
  "ingredients": ["ingredient 1", "ingredient 2"],
  "allergens": ["nuts", "dairy", "gluten"],
  "healthBenefits": ["benefit 1", "benefit 2"]
}

Give typical values for a standard serving.
Respond ONLY with the JSON object, no additional text."""


class AnalysisFailed(Exception):
    """The AI service could not identify the dish."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _complete(
    messages: list[dict[str, Any]],
    model: str,
    max_tokens: int,
    config: AIConfig,
    json_mode: bool = False,
) -> str:
    if not config.enabled or not config.api_key:
        raise AnalysisFailed("AI analysis service is not configured")

    extra: dict[str, Any] = {}
    if json_mode:
        extra["response_format"] = {"type": "json_object"}

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=0.2,
            **extra,
        )
        return response.choices[0].message.content or ""
    except Exception as exc:
        logger.warning("Groq call to %s failed", model, exc_info=True)
        raise AnalysisFailed(str(exc) or exc.__class__.__name__) from exc


def _extract_json(content: str) -> dict[str, Any]:
    """Pull the first JSON object out of a model reply."""
    match = _JSON_OBJECT.search(content)
    if not match:
        raise AnalysisFailed("Could not parse AI response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise AnalysisFailed("Could not parse AI response") from exc
    if not isinstance(parsed, dict):
        raise AnalysisFailed("Could not parse AI response")
    return parsed


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_strings(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _normalize_dish(analysis: dict[str, Any], fallback_description: str = "") -> AnalyzedDish:
    name = str(analysis.get("name") or analysis.get("dishName") or "").strip()
    ingredients = analysis.get("ingredients") or analysis.get("mainIngredients")
    confidence = _as_number(analysis.get("confidence"))

    return AnalyzedDish(
        name=name or "Unknown Dish",
        cuisine=str(analysis.get("cuisine") or "Unknown"),
        description=str(analysis.get("description") or fallback_description),
        ingredients=_as_strings(ingredients),
        estimated_calories=max(0.0, _as_number(analysis.get("estimatedCalories"))),
        dietary_info=_as_strings(analysis.get("dietaryInfo")),
        confidence=min(100.0, max(0.0, confidence)),
    )


def analyze_image(
    image_bytes: bytes,
    mime_type: str,
    config: AIConfig = DEFAULT_AI_CONFIG,
) -> AnalyzedDish:
    """Identify the dish in a photo with the Groq vision model."""
    if not image_bytes:
        raise AnalysisFailed("No image data provided")

    encoded = base64.b64encode(image_bytes).decode("ascii")
    messages = [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": IMAGE_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                },
            ],
        },
    ]
    content = _complete(messages, config.vision_model, config.max_tokens, config)
    return _normalize_dish(_extract_json(content))


def analyze_text(
    description: str,
    config: AIConfig = DEFAULT_AI_CONFIG,
) -> AnalyzedDish:
    """Identify the dish a free-text description is talking about."""
    messages = [
        {
            "role": "user",
            "content": (
                f'Based on this food description: "{description}", '
                "provide the following information in JSON format:\n" + DISH_JSON_FORMAT
            ),
        },
    ]
    content = _complete(messages, config.text_model, config.max_tokens, config, json_mode=True)
    return _normalize_dish(_extract_json(content), fallback_description=description)


def get_nutrition_info(
    dish_name: str,
    config: AIConfig = DEFAULT_AI_CONFIG,
) -> dict[str, Any]:
    """Typical nutritional breakdown of a standard serving of ``dish_name``."""
    messages = [
        {
            "role": "user",
            "content": (
                f'Provide detailed nutritional information for "{dish_name}" '
                "in JSON format:\n" + NUTRITION_JSON_FORMAT % dish_name
            ),
        },
    ]
    content = _complete(
        messages, config.text_model, config.nutrition_max_tokens, config, json_mode=True,
    )
    return _extract_json(content)
