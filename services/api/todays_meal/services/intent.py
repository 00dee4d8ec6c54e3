import logging
from typing import Sequence

from pydantic import ValidationError

from ..core.ai_client import LLMError
from ..core.text import dedupe, extract_json_object
from ..schemas import Intent
from .prompts import INTENT_PROMPT, SYSTEM_PROMPT

logger = logging.getLogger("todays_meal.intent")

_REQUEST_TYPE_ALIASES = {
    "specific": "specific_dish",
    "dish": "specific_dish",
    "substitution": "substitute",
}
_REQUEST_TYPES = {"ingredients", "mood", "specific_dish", "substitute", "other"}


class IntentClassifier:
    """Turns a free-text turn into a structured Intent with one LLM call."""

    def __init__(self, llm):
        self.llm = llm

    async def classify(self, user_text: str, known_ingredients: Sequence[str]) -> Intent:
        """Classify a user turn. Never raises: failures fail open."""
        prompt = INTENT_PROMPT.format(
            known=", ".join(known_ingredients) if known_ingredients else "なし",
            text=user_text,
        )
        try:
            reply = await self.llm.complete(prompt, system_prompt=SYSTEM_PROMPT, purpose="intent")
        except LLMError as e:
            logger.warning(f"Intent classification failed, treating input as valid: {e}")
            return Intent()

        data = extract_json_object(reply)
        if data is None:
            logger.warning("Intent reply had no JSON object, treating input as valid")
            return Intent()

        try:
            return self._parse(data, known_ingredients)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Malformed intent payload, treating input as valid: {e}")
            return Intent()

    def _parse(self, data: dict, known_ingredients: Sequence[str]) -> Intent:
        # Older prompt revisions used "isValidInput" / "ingredients"
        if "isValid" not in data and "isValidInput" in data:
            data["isValid"] = data["isValidInput"]
        if "newIngredients" not in data and "ingredients" in data:
            data["newIngredients"] = data["ingredients"]

        raw_type = str(data.get("requestType") or "other").strip().lower()
        raw_type = _REQUEST_TYPE_ALIASES.get(raw_type, raw_type)
        data["requestType"] = raw_type if raw_type in _REQUEST_TYPES else "other"

        raw_ingredients = data.get("newIngredients") or []
        if isinstance(raw_ingredients, str):
            raw_ingredients = [raw_ingredients]
        known = set(known_ingredients)
        data["newIngredients"] = [i for i in dedupe(raw_ingredients) if i not in known]

        for key in ("specificDish", "missingIngredient"):
            value = data.get(key)
            data[key] = str(value).strip() if value not in (None, "", "null") else None

        if not isinstance(data.get("isValid", True), bool):
            data["isValid"] = str(data["isValid"]).strip().lower() not in ("false", "0", "no")

        return Intent.model_validate(data)
