"""Per-request chat state machine.

    START -> CLASSIFY -> SUBSTITUTE_ANSWER | DISH_LOOKUP | INVALID_RESPONSE | PRE_RECIPE_ACK
          -> [GENERATING] -> DONE

The pipeline yields status / recipe / response events only. Framing events
(conversationId, done, error) and persistence belong to the HTTP layer.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.ai_client import ChatTurn
from ..core.text import dedupe
from ..data.catalog import PANTRY_STAPLES
from ..models import RecipeKnowledgeEntry
from ..schemas import Intent, Recipe, StreamEvent
from .intent import IntentClassifier
from .knowledge import find_by_name
from .preferences import extract_signals, format_preferences_for_prompt, get_preferences, record_signals
from .recipe_generator import GenerationStats, RecipeGenerator
from .responder import ConversationalResponder, acknowledgement

logger = logging.getLogger("todays_meal.chat")


class PipelineState(str, enum.Enum):
    START = "start"
    CLASSIFY = "classify"
    SUBSTITUTE_ANSWER = "substitute_answer"
    DISH_LOOKUP = "dish_lookup"
    INVALID_RESPONSE = "invalid_response"
    PRE_RECIPE_ACK = "pre_recipe_ack"
    GENERATING = "generating"
    DONE = "done"


@dataclass
class GenerationSession:
    """Transient state of one chat request."""
    user_id: str
    message: str
    history: list[ChatTurn] = field(default_factory=list)
    ingredients: list[str] = field(default_factory=list)
    max_cooking_time: Optional[int] = None
    intent: Optional[Intent] = None
    recipes: list[Recipe] = field(default_factory=list)
    stats: GenerationStats = field(default_factory=GenerationStats)
    reply: str = ""
    state: PipelineState = PipelineState.START

    @property
    def used_names(self) -> list[str]:
        return [r.name for r in self.recipes]


def _is_covered(required: str, known: Sequence[str]) -> bool:
    needle = required.lower()
    return any(k.lower() in needle or needle in k.lower() for k in known)


def missing_required_ingredients(entry: RecipeKnowledgeEntry, known: Sequence[str]) -> list[str]:
    """Ingredients of a reference recipe the user has not mentioned, staples excluded."""
    missing = []
    for item in entry.ingredients or []:
        name = str(item.get("name", "")).strip()
        if not name or name in PANTRY_STAPLES or _is_covered(name, known):
            continue
        missing.append(name)
    return dedupe(missing)


class ChatPipeline:
    def __init__(
        self,
        classifier: IntentClassifier,
        generator: RecipeGenerator,
        responder: ConversationalResponder,
    ):
        self.classifier = classifier
        self.generator = generator
        self.responder = responder

    def _respond(self, session: GenerationSession, text: str) -> StreamEvent:
        session.reply = text
        session.state = PipelineState.DONE
        return StreamEvent(type="response", data=text)

    async def stream(self, db: Session, session: GenerationSession) -> AsyncIterator[StreamEvent]:
        session.state = PipelineState.CLASSIFY
        intent = await self.classifier.classify(session.message, session.ingredients)
        session.intent = intent
        session.ingredients = dedupe([*session.ingredients, *intent.new_ingredients])
        logger.info(
            f"Classified turn as {intent.request_type} (valid={intent.is_valid}, "
            f"new_ingredients={intent.new_ingredients})"
        )

        if intent.request_type == "substitute" and intent.missing_ingredient:
            session.state = PipelineState.SUBSTITUTE_ANSWER
            text = await self.responder.substitution_advice(
                session.message, intent.missing_ingredient, session.ingredients, session.history
            )
            yield self._respond(session, text)
            return

        if intent.request_type == "specific_dish" and intent.specific_dish:
            session.state = PipelineState.DISH_LOOKUP
            entry = find_by_name(db, intent.specific_dish)
            missing = missing_required_ingredients(entry, session.ingredients) if entry else []
            if missing:
                text = await self.responder.missing_ingredients(
                    intent.specific_dish, entry, missing, session.ingredients, session.history
                )
                yield self._respond(session, text)
                return

        if not intent.is_valid:
            session.state = PipelineState.INVALID_RESPONSE
            text = await self.responder.clarify(session.message, session.history)
            yield self._respond(session, text)
            return

        session.state = PipelineState.PRE_RECIPE_ACK
        record_signals(db, session.user_id, extract_signals(session.message, intent.new_ingredients))
        preferences_text = format_preferences_for_prompt(get_preferences(db, session.user_id))
        yield StreamEvent(type="status", data=acknowledgement(session.ingredients))

        session.state = PipelineState.GENERATING
        async for recipe in self.generator.generate(
            db,
            session.message,
            session.ingredients,
            history=session.history,
            preferences_text=preferences_text,
            max_cooking_time=session.max_cooking_time,
            stats=session.stats,
        ):
            session.recipes.append(recipe)
            yield StreamEvent(type="recipe", data=recipe.to_wire())

        text = await self.responder.summarize(
            session.message, session.ingredients, session.recipes, session.history
        )
        yield self._respond(session, text)
