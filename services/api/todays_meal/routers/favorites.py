"""
Router for favorite recipes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user
from ..models import Favorite, SavedRecipe, User
from ..schemas import FavoriteCreate, FavoriteOut
from ..services.conversations import recipe_from_row

logger = logging.getLogger("todays_meal.favorites")

router = APIRouter()


def _find_favorite(db: Session, user_id: str, recipe_id: str):
    return db.scalar(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.recipe_id == recipe_id)
    )


@router.get("/favorites", response_model=list[FavoriteOut])
def list_favorites(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    favorites = db.scalars(
        select(Favorite)
        .where(Favorite.user_id == user.id)
        .order_by(Favorite.created_at.desc())
    ).all()
    return [FavoriteOut(recipe=recipe_from_row(f.recipe), favorited_at=f.created_at) for f in favorites]


@router.post("/favorites", response_model=FavoriteOut, status_code=201)
def add_favorite(
    body: FavoriteCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    recipe = db.get(SavedRecipe, body.recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")

    if _find_favorite(db, user.id, recipe.id):
        raise HTTPException(status_code=409, detail="Recipe is already a favorite")

    fav = Favorite(user_id=user.id, recipe_id=recipe.id)
    db.add(fav)
    db.commit()
    db.refresh(fav)
    logger.info(f"User {user.id} favorited recipe {recipe.id}")
    return FavoriteOut(recipe=recipe_from_row(recipe), favorited_at=fav.created_at)


@router.delete("/favorites/{recipe_id}", status_code=204)
def remove_favorite(
    recipe_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    fav = _find_favorite(db, user.id, recipe_id)
    if not fav:
        raise HTTPException(status_code=404, detail="Favorite not found")
    db.delete(fav)
    db.commit()
    return None


@router.get("/favorites/check/{recipe_id}")
def check_favorite(
    recipe_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"isFavorite": _find_favorite(db, user.id, recipe_id) is not None}
