"""Conversation persistence: users, threads, messages and generated recipes."""

import logging
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.ai_client import ChatTurn
from ..models import Conversation, Message, SavedRecipe, User, utcnow
from ..schemas import Nutrition, Recipe, SideDish

logger = logging.getLogger("todays_meal.conversations")

TITLE_MAX_CHARS = 30


def get_or_create_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user:
        return user
    user = User(id=user_id, name=user_id)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user_id}")
    return user


def get_conversation(db: Session, user_id: str, conversation_id: str) -> Optional[Conversation]:
    return db.scalar(
        select(Conversation).where(
            Conversation.id == conversation_id,
            Conversation.user_id == user_id,
        )
    )


def list_conversations(db: Session, user_id: str) -> list[Conversation]:
    return list(
        db.scalars(
            select(Conversation)
            .where(Conversation.user_id == user_id)
            .order_by(Conversation.updated_at.desc())
        ).all()
    )


def count_messages(db: Session, conversation_id: str) -> int:
    return db.scalar(
        select(func.count(Message.id)).where(Message.conversation_id == conversation_id)
    ) or 0


def cleanup_old_conversations(db: Session, user_id: str, keep: int) -> int:
    """Delete all but the `keep` most recently updated conversations."""
    stale = db.scalars(
        select(Conversation)
        .where(Conversation.user_id == user_id)
        .order_by(Conversation.updated_at.desc(), Conversation.created_at.desc())
        .offset(keep)
    ).all()
    for conv in stale:
        db.delete(conv)
    if stale:
        db.commit()
        logger.info(f"Pruned {len(stale)} old conversations for user {user_id}")
    return len(stale)


def create_conversation(db: Session, user_id: str, keep: int) -> Conversation:
    conv = Conversation(user_id=user_id, ingredients=[])
    db.add(conv)
    db.commit()
    db.refresh(conv)
    cleanup_old_conversations(db, user_id, keep)
    return conv


def title_from_message(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= TITLE_MAX_CHARS:
        return text
    return text[:TITLE_MAX_CHARS] + "..."


def append_message(
    db: Session,
    conversation: Conversation,
    role: str,
    content: str,
    recipe_ids: Sequence[str] = (),
) -> Message:
    message = Message(
        conversation_id=conversation.id,
        role=role,
        content=content,
        recipe_ids=list(recipe_ids),
    )
    db.add(message)
    conversation.updated_at = utcnow()
    if role == "user" and not conversation.title:
        conversation.title = title_from_message(content)
    db.commit()
    db.refresh(message)
    return message


def fetch_messages(db: Session, conversation_id: str) -> list[Message]:
    return list(
        db.scalars(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())
        ).all()
    )


def fetch_history(db: Session, conversation_id: str, exclude_id: Optional[str] = None) -> list[ChatTurn]:
    """Ordered prompt history; `exclude_id` drops the turn being answered."""
    return [
        ChatTurn(role=m.role, content=m.content)
        for m in fetch_messages(db, conversation_id)
        if m.id != exclude_id
    ]


def save_recipes(db: Session, recipes: Sequence[Recipe]) -> list[SavedRecipe]:
    rows = []
    for recipe in recipes:
        row = SavedRecipe(
            id=recipe.id,
            name=recipe.name,
            ingredients=[i.model_dump() for i in recipe.ingredients],
            steps=list(recipe.steps),
            cooking_time=recipe.cooking_time,
            calories=recipe.calories,
            protein=recipe.nutrition.protein,
            fat=recipe.nutrition.fat,
            carbs=recipe.nutrition.carbs,
            category=recipe.category,
            image_url=recipe.image_url,
            source_url=recipe.source_url,
            source_name=recipe.source_name,
            side_dishes=[s.model_dump() for s in recipe.side_dishes],
        )
        db.add(row)
        rows.append(row)
    if rows:
        db.commit()
    return rows


def recipe_from_row(row: SavedRecipe) -> Recipe:
    return Recipe(
        id=row.id,
        name=row.name,
        ingredients=row.ingredients or [],
        steps=row.steps or [],
        cooking_time=row.cooking_time,
        calories=row.calories,
        nutrition=Nutrition(protein=row.protein, fat=row.fat, carbs=row.carbs),
        category=row.category,
        image_url=row.image_url,
        source_url=row.source_url,
        source_name=row.source_name,
        side_dishes=[SideDish(**s) for s in row.side_dishes or []],
    )


def recipes_by_id(db: Session, recipe_ids: Sequence[str]) -> list[Recipe]:
    """Stored recipes in the order of `recipe_ids`; unknown ids are skipped."""
    if not recipe_ids:
        return []
    rows = {r.id: r for r in db.scalars(select(SavedRecipe).where(SavedRecipe.id.in_(recipe_ids))).all()}
    return [recipe_from_row(rows[rid]) for rid in recipe_ids if rid in rows]
