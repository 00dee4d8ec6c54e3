from typing import Sequence

from ..core.text import first_match
from ..data.catalog import (
    CATEGORY_RULES,
    DEFAULT_CATEGORY,
    DEFAULT_DISH_CUISINE,
    DISH_CUISINE_RULES,
    SIDE_DISHES,
)
from ..schemas import Recipe, SideDish


def detect_category(name: str) -> str:
    """Display category for a dish name (first rule in table order wins)."""
    return first_match(name, CATEGORY_RULES, DEFAULT_CATEGORY)


def image_url_for(category: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{category}.jpg"


def detect_dish_cuisine(name: str, ingredient_names: Sequence[str] = ()) -> str:
    """Cuisine family of a dish: its name decides, ingredients break the tie."""
    cuisine = first_match(name, DISH_CUISINE_RULES)
    if cuisine:
        return cuisine
    return first_match(" ".join(ingredient_names), DISH_CUISINE_RULES, DEFAULT_DISH_CUISINE)


def suggest_side_dishes(cuisine: str) -> list[SideDish]:
    rows = SIDE_DISHES.get(cuisine, SIDE_DISHES[DEFAULT_DISH_CUISINE])
    return [SideDish(name=name, category=category, description=description) for name, category, description in rows]


def decorate_recipe(recipe: Recipe, image_base_url: str) -> Recipe:
    """Attach category, image and side dishes to a freshly generated recipe."""
    category = detect_category(recipe.name)
    cuisine = detect_dish_cuisine(recipe.name, [i.name for i in recipe.ingredients])
    return recipe.model_copy(update={
        "category": category,
        "image_url": recipe.image_url or image_url_for(category, image_base_url),
        "side_dishes": suggest_side_dishes(cuisine),
    })
