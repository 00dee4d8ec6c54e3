"""
Router for conversation and recipe history.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user
from ..models import Conversation, Message, User
from ..schemas import ConversationOut, RecipeHistoryOut
from ..services.conversations import get_conversation, list_conversations, recipes_by_id
from .chat import conversation_out

router = APIRouter()


# Sortable recipe-history keys; anything else falls back to created_at.
RECIPE_SORT_KEYS = {
    "created_at": lambda item: item.created_at,
    "cooking_time": lambda item: item.recipe.cooking_time,
    "calories": lambda item: item.recipe.calories,
    "name": lambda item: item.recipe.name,
}


@router.get("/history", response_model=list[ConversationOut])
def get_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Conversations, most recently active first."""
    page = list_conversations(db, user.id)[offset:offset + limit]
    return [conversation_out(db, c) for c in page]


@router.get("/history/recipes", response_model=list[RecipeHistoryOut])
def get_recipe_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    sort_by: str = Query("created_at", alias="sortBy"),
    order: str = Query("desc"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Every recipe proposed to the user, newest first unless sorted otherwise."""
    messages = db.scalars(
        select(Message)
        .join(Conversation, Conversation.id == Message.conversation_id)
        .where(Conversation.user_id == user.id, Message.role == "assistant")
        .order_by(Message.created_at.desc())
    ).all()

    items = [
        RecipeHistoryOut(recipe=recipe, conversation_id=m.conversation_id, created_at=m.created_at)
        for m in messages
        for recipe in recipes_by_id(db, m.recipe_ids or [])
    ]
    key = RECIPE_SORT_KEYS.get(sort_by, RECIPE_SORT_KEYS["created_at"])
    items.sort(key=key, reverse=order.lower() != "asc")
    return items[offset:offset + limit]


@router.delete("/history/conversations/{conversation_id}", status_code=204)
def delete_conversation(
    conversation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    conv = get_conversation(db, user.id, conversation_id)
    if not conv:
        raise HTTPException(status_code=404, detail="Conversation not found")
    db.delete(conv)
    db.commit()
    return None
