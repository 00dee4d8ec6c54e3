"""Pydantic schemas for the Today's Meal API.

Request/response models for:
- Recipes (wire format shared by REST responses and SSE frames)
- Intent classification results
- Chat requests, responses and stream events
- History, favorites and preferences
"""

import json
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Recipe ---

class Ingredient(BaseModel):
    name: str = Field(..., min_length=1)
    amount: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, v):
        # amounts are human-readable strings, never structured quantities
        if v is None:
            return ""
        return str(v)


class Nutrition(BaseModel):
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)


class SideDish(BaseModel):
    name: str
    category: str
    description: Optional[str] = None


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    ingredients: list[Ingredient]
    steps: list[str] = Field(..., min_length=5, max_length=8)
    cooking_time: int = Field(..., alias="cookingTime", gt=0)
    calories: int = Field(..., gt=0)
    nutrition: Nutrition
    category: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    source_name: Optional[str] = Field(None, alias="sourceName")
    side_dishes: list[SideDish] = Field(default_factory=list, alias="sideDishes")

    @field_validator("cooking_time", "calories", mode="before")
    @classmethod
    def _round_numbers(cls, v):
        if isinstance(v, float):
            return int(round(v))
        return v

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# --- Intent ---

RequestType = Literal["ingredients", "mood", "specific_dish", "substitute", "other"]


class Intent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(True, alias="isValid")
    new_ingredients: list[str] = Field(default_factory=list, alias="newIngredients")
    request_type: RequestType = Field("other", alias="requestType")
    specific_dish: Optional[str] = Field(None, alias="specificDish")
    missing_ingredient: Optional[str] = Field(None, alias="missingIngredient")


# --- Chat ---

class ChatFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_cooking_time: Optional[int] = Field(None, alias="maxCookingTime", gt=0)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    conversation_id: Optional[str] = Field(None, alias="conversationId")
    filters: Optional[ChatFilters] = None
    stream: bool = False


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(..., alias="conversationId")
    message: str
    recipes: list[Recipe] = []


EventType = Literal["conversationId", "status", "recipe", "response", "error", "done"]


class StreamEvent(BaseModel):
    """One typed frame of the chat stream."""
    type: EventType
    data: Any = None

    def to_sse(self) -> str:
        payload = {"type": self.type}
        if self.data is not None:
            payload["data"] = self.data
        return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


# --- History ---

class ConversationOut(BaseModel):
    id: str
    title: Optional[str]
    created_at: datetime
    updated_at: datetime
    message_count: Optional[int] = None

    class Config:
        from_attributes = True


class MessageOut(BaseModel):
    id: str
    role: str
    content: str
    recipes: list[Recipe] = []
    created_at: datetime


class ConversationDetailOut(BaseModel):
    conversation: ConversationOut
    messages: list[MessageOut]


class RecipeHistoryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe: Recipe
    conversation_id: str = Field(..., alias="conversationId")
    created_at: datetime


# --- Favorites ---

class FavoriteCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: str = Field(..., alias="recipeId", min_length=1)


class FavoriteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe: Recipe
    favorited_at: datetime


# --- Preferences ---

class PreferenceOut(BaseModel):
    preference_type: str
    preference_key: str
    preference_value: str
    frequency: int
    last_used: datetime

    class Config:
        from_attributes = True
