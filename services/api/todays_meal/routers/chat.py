"""
Router for chat turns.

POST /chat answers either as one JSON body or, with stream=true, as
server-sent events:

    conversationId -> status -> recipe* -> response -> done

An exception at any point replaces `done` with a single `error` frame.
"""

import logging
from typing import AsyncIterator, Callable

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..db import get_db, get_session_factory
from ..deps import get_current_user, get_pipeline
from ..models import Conversation, User
from ..schemas import (
    ChatRequest,
    ChatResponse,
    ConversationDetailOut,
    ConversationOut,
    MessageOut,
    StreamEvent,
)
from ..services.chat_pipeline import ChatPipeline, GenerationSession
from ..services.conversations import (
    append_message,
    count_messages,
    create_conversation,
    fetch_history,
    fetch_messages,
    get_conversation,
    list_conversations,
    recipes_by_id,
    save_recipes,
)
from ..settings import settings

logger = logging.getLogger("todays_meal.chat")

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

STREAM_ERROR_MESSAGE = "申し訳ありません。エラーが発生しました。もう一度お試しください。"


def conversation_out(db: Session, conv: Conversation) -> ConversationOut:
    out = ConversationOut.model_validate(conv)
    out.message_count = count_messages(db, conv.id)
    return out


def _resolve_conversation(db: Session, user: User, conversation_id) -> Conversation:
    if conversation_id:
        conv = get_conversation(db, user.id, conversation_id)
        if not conv:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return conv
    return create_conversation(db, user.id, keep=settings.max_conversations_per_user)


def _finish_turn(db: Session, conversation_id: str, session: GenerationSession, reply: str) -> None:
    """Persist the accumulated ingredients and the assistant turn.

    Recipes are already stored by the time this runs. An empty reply with no
    recipes records the ingredients only.
    """
    conv = db.get(Conversation, conversation_id)
    if conv is None:
        logger.warning(f"Conversation {conversation_id} vanished before the reply was saved")
        return
    conv.ingredients = list(session.ingredients)
    if not reply and not session.recipes:
        db.commit()
        return
    append_message(db, conv, "assistant", reply, [r.id for r in session.recipes])


async def run_turn(
    db: Session,
    pipeline: ChatPipeline,
    conversation_id: str,
    session: GenerationSession,
) -> AsyncIterator[StreamEvent]:
    """Run the pipeline, storing each recipe as soon as it is emitted.

    A failure still saves what the client has seen: streamed recipes stay
    stored and are linked to an assistant turn listing their names.
    """
    try:
        async for event in pipeline.stream(db, session):
            if event.type == "recipe":
                save_recipes(db, session.recipes[-1:])
            yield event
    except Exception:
        db.rollback()
        _finish_turn(db, conversation_id, session, "、".join(session.used_names))
        raise
    _finish_turn(db, conversation_id, session, session.reply)


@router.post("/chat/start", response_model=ChatResponse, response_model_by_alias=True)
async def start_chat(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    pipeline: ChatPipeline = Depends(get_pipeline),
):
    """Open a new conversation with an assistant greeting."""
    conv = create_conversation(db, user.id, keep=settings.max_conversations_per_user)
    greeting = await pipeline.responder.greeting()
    append_message(db, conv, "assistant", greeting)
    return ChatResponse(conversation_id=conv.id, message=greeting, recipes=[])


@router.post("/chat", response_model=ChatResponse, response_model_by_alias=True)
@limiter.limit(settings.rate_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    pipeline: ChatPipeline = Depends(get_pipeline),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
):
    """Handle one user turn."""
    text = body.message.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message is required")

    conv = _resolve_conversation(db, user, body.conversation_id)
    user_message = append_message(db, conv, "user", text)

    session = GenerationSession(
        user_id=user.id,
        message=text,
        history=fetch_history(db, conv.id, exclude_id=user_message.id),
        ingredients=list(conv.ingredients or []),
        max_cooking_time=body.filters.max_cooking_time if body.filters else None,
    )
    conversation_id = conv.id

    if not body.stream:
        try:
            async for _ in run_turn(db, pipeline, conversation_id, session):
                pass
        except Exception as e:
            logger.exception(f"Chat turn failed for conversation {conversation_id}")
            raise HTTPException(status_code=500, detail=STREAM_ERROR_MESSAGE) from e
        return ChatResponse(conversation_id=conversation_id, message=session.reply, recipes=session.recipes)

    async def event_generator():
        stream_db = session_factory()
        try:
            yield StreamEvent(type="conversationId", data=conversation_id).to_sse()
            async for event in run_turn(stream_db, pipeline, conversation_id, session):
                yield event.to_sse()
            yield StreamEvent(type="done").to_sse()
        except Exception:
            # Recipes already sent stay sent; the client only needs a terminal frame.
            logger.exception(f"Chat stream failed for conversation {conversation_id}")
            yield StreamEvent(type="error", data=STREAM_ERROR_MESSAGE).to_sse()
        finally:
            stream_db.close()

    return StreamingResponse(event_generator(), media_type="text/event-stream")


@router.get("/chat/conversations", response_model=list[ConversationOut])
def get_conversations(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [conversation_out(db, c) for c in list_conversations(db, user.id)]


@router.get("/chat/conversations/{conversation_id}", response_model=ConversationDetailOut)
def get_conversation_detail(
    conversation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    conv = get_conversation(db, user.id, conversation_id)
    if not conv:
        raise HTTPException(status_code=404, detail="Conversation not found")

    messages = [
        MessageOut(
            id=m.id,
            role=m.role,
            content=m.content,
            recipes=recipes_by_id(db, m.recipe_ids or []),
            created_at=m.created_at,
        )
        for m in fetch_messages(db, conv.id)
    ]
    return ConversationDetailOut(conversation=conversation_out(db, conv), messages=messages)
