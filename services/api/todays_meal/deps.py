"""FastAPI dependencies for the Today's Meal API.

Provides:
- Database session dependency
- User resolution (X-User-Id header -> guest fallback)
- Chat pipeline and responder handles built at startup
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from .db import get_db
from .models import User
from .services.chat_pipeline import ChatPipeline
from .services.conversations import get_or_create_user

GUEST_USER_ID = "guest"
MAX_USER_ID_LENGTH = 64


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> User:
    """Resolve the calling user.

    Identity is asserted by the transport layer in front of the API. A
    missing header maps to the shared guest user; unknown ids are created
    on first use.

    Raises:
        HTTPException 400 if the header is blank or too long
    """
    if x_user_id is None:
        return get_or_create_user(db, GUEST_USER_ID)

    user_id = x_user_id.strip()
    if not user_id or len(user_id) > MAX_USER_ID_LENGTH:
        raise HTTPException(status_code=400, detail="Invalid X-User-Id header")
    return get_or_create_user(db, user_id)


def get_pipeline(request: Request) -> ChatPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Chat pipeline is not initialized")
    return pipeline
