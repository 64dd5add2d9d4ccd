# -*- coding: utf-8 -*-
"""Analyzer — generative nutrition estimates via an OpenAI-compatible endpoint."""

from __future__ import annotations

import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx

from ..accounts.models import FoodItem, Profile
from ..config import settings
from .models import EMPTY_INSIGHT, FAILED_INSIGHT, DailyInsight

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert nutritionist AI. Estimate calories and macros. "
    "Return STRICT JSON only. Do NOT wrap in markdown or code fences."
)

FOOD_ITEM_SCHEMA = (
    "{\n"
    '  "name": "Food Name",\n'
    '  "calories": 100,\n'
    '  "macros": {"protein": 0, "carbs": 0, "fat": 0},\n'
    '  "confidence": "High" | "Medium" | "Low",\n'
    '  "description": "Short appetizing description",\n'
    '  "portionSize": "1 cup",\n'
    '  "alternatives": ["healthier alternative"]\n'
    "}"
)


class NutritionAnalyzer(Protocol):
    async def analyze_image(self, image_bytes: bytes, mime: str = "image/jpeg") -> FoodItem: ...

    async def analyze_query(self, text: str) -> FoodItem: ...

    async def analyze_recipe(self, text: str) -> FoodItem: ...

    async def suggest_meal_note(self, item: FoodItem) -> str: ...

    async def generate_daily_insight(self, profile: Profile) -> DailyInsight: ...


@dataclass(frozen=True)
class AnalyzerSettings:
    base_url: str
    api_key: Optional[str]
    model: str
    timeout: float
    max_tokens: int
    temperature: float


def resolve_analyzer_settings() -> AnalyzerSettings:
    return AnalyzerSettings(
        base_url=settings.analyzer_base_url,
        api_key=settings.analyzer_api_key,
        model=settings.analyzer_model,
        timeout=settings.analyzer_timeout,
        max_tokens=settings.analyzer_max_tokens,
        temperature=settings.analyzer_temperature,
    )


def _extract_json(text: str) -> Dict[str, Any]:
    """Strip markdown fences and parse the first JSON object in ``text``."""
    clean = re.sub(r"```(?:json)?\s*|\s*```", "", text or "").strip()
    match = re.search(r"\{.*\}", clean, re.DOTALL)
    if match:
        clean = match.group(0)
    try:
        parsed = json.loads(clean)
    except ValueError as exc:
        raise ValueError("Invalid response format from AI") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Invalid response format from AI")
    return parsed


def _as_float(value: Any) -> float:
    if isinstance(value, (int, float)):
        return max(0.0, float(value))
    if isinstance(value, str):
        m = re.search(r"-?\d+(?:\.\d+)?", value)
        if m:
            return max(0.0, float(m.group(0)))
    return 0.0


def _normalize_food_item(parsed: Dict[str, Any]) -> Dict[str, Any]:
    macros_raw = parsed.get("macros")
    if not isinstance(macros_raw, dict):
        macros_raw = parsed
    macros = {
        "protein": _as_float(macros_raw.get("protein", macros_raw.get("protein_g"))),
        "carbs": _as_float(macros_raw.get("carbs", macros_raw.get("carbohydrates", macros_raw.get("carbs_g")))),
        "fat": _as_float(macros_raw.get("fat", macros_raw.get("fats", macros_raw.get("fat_g")))),
    }
    confidence = str(parsed.get("confidence") or "Medium").strip().capitalize()
    if confidence not in {"High", "Medium", "Low"}:
        confidence = "Medium"
    alternatives = parsed.get("alternatives") or []
    if isinstance(alternatives, str):
        alternatives = [alternatives]
    return {
        "name": str(parsed.get("name") or parsed.get("food") or "").strip(),
        "calories": _as_float(parsed.get("calories", parsed.get("calories_kcal"))),
        "macros": macros,
        "confidence": confidence,
        "description": str(parsed.get("description") or ""),
        "portion_size": str(parsed.get("portionSize") or parsed.get("portion_size") or parsed.get("portion") or ""),
        "source": parsed.get("source"),
        "alternatives": [str(a) for a in alternatives if a],
        "image_url": parsed.get("imageUrl") or parsed.get("image_url"),
    }


def _data_url(mime: str, image_bytes: bytes) -> str:
    b64 = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime};base64,{b64}"


class OpenAICompatibleAnalyzer:
    def __init__(
        self,
        cfg: AnalyzerSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or resolve_analyzer_settings()
        self._transport = transport

    async def _complete(self, messages: List[Dict[str, Any]], *, json_mode: bool = False) -> str:
        headers = {"Content-Type": "application/json"}
        if self.cfg.api_key:
            headers["Authorization"] = f"Bearer {self.cfg.api_key}"
        payload: Dict[str, Any] = {
            "model": self.cfg.model,
            "messages": messages,
            "temperature": self.cfg.temperature,
            "max_tokens": self.cfg.max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        url = f"{self.cfg.base_url.rstrip('/')}/chat/completions"
        async with httpx.AsyncClient(timeout=self.cfg.timeout, transport=self._transport) as client:
            resp = await client.post(url, headers=headers, json=payload)
            resp.raise_for_status()
            data = resp.json()
        try:
            return str(data["choices"][0]["message"]["content"] or "")
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("Analyzer response missing choices[0].message.content") from exc

    async def _food_item(self, messages: List[Dict[str, Any]]) -> FoodItem:
        text = await self._complete(messages, json_mode=True)
        if not text.strip():
            raise RuntimeError("No response from AI")
        return FoodItem.model_validate(_normalize_food_item(_extract_json(text)))

    async def analyze_image(self, image_bytes: bytes, mime: str = "image/jpeg") -> FoodItem:
        prompt = (
            "Analyze this food image. Provide nutritional information, estimating portion size. "
            f"Be as accurate as possible. Output JSON:\n{FOOD_ITEM_SCHEMA}"
        )
        return await self._food_item(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": _data_url(mime, image_bytes)}},
                    ],
                },
            ]
        )

    async def analyze_query(self, text: str) -> FoodItem:
        prompt = f'Analyze this food query: "{text}". Provide nutritional estimates. Output JSON:\n{FOOD_ITEM_SCHEMA}'
        return await self._food_item(
            [{"role": "system", "content": SYSTEM_PROMPT}, {"role": "user", "content": prompt}]
        )

    async def analyze_recipe(self, text: str) -> FoodItem:
        prompt = (
            f'Analyze this recipe content (URL or text): "{text}". Identify the dish. '
            "Calculate the total nutrition for ONE STANDARD SERVING. If the number of servings is "
            f"not specified, estimate based on typical serving sizes. Output JSON:\n{FOOD_ITEM_SCHEMA}"
        )
        item = await self._food_item(
            [{"role": "system", "content": SYSTEM_PROMPT}, {"role": "user", "content": prompt}]
        )
        if not item.portion_size:
            item.portion_size = "1 serving"
        return item

    async def suggest_meal_note(self, item: FoodItem) -> str:
        prompt = (
            "Generate a very short (max 15 words), personal, encouraging, or reflective journal note "
            f"for a user who just ate {item.name}. It should be written in the first person "
            '(e.g., "I feel...", "Great source of...", "Enjoyed this..."). Do not include quotes.'
        )
        try:
            text = await self._complete([{"role": "user", "content": prompt}])
        except Exception as exc:
            logger.warning("Note suggestion error: %s", exc)
            return ""
        return text.strip() or f"Enjoyed a delicious {item.name}!"

    async def generate_daily_insight(self, profile: Profile) -> DailyInsight:
        prompt = (
            "Generate a short, friendly, and motivating daily notification for a user named "
            f"{profile.name}. They have a daily goal of {profile.daily_calorie_goal} calories.\n"
            'Return STRICTLY JSON: {"title": "Short Title (e.g. Daily Tip)", '
            '"message": "One sentence message max 20 words."}'
        )
        try:
            text = await self._complete([{"role": "user", "content": prompt}], json_mode=True)
            if not text.strip():
                return EMPTY_INSIGHT
            return DailyInsight.model_validate(_extract_json(text))
        except Exception as exc:
            logger.warning("Insight generation error: %s", exc)
            return FAILED_INSIGHT
