"""
Router for the learned preference profile.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user
from ..models import User
from ..schemas import PreferenceOut
from ..services.preferences import get_preferences

router = APIRouter()


@router.get("/preferences", response_model=list[PreferenceOut])
def list_preferences(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Preference rows, most frequent first."""
    return get_preferences(db, user.id)
