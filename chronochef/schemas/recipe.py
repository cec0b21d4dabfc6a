from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from chronochef.core.exceptions import ValidationError
from chronochef.schemas.base import CamelModel, errors_from_pydantic
from chronochef.services.recipe.recipe_text import (
    DEFAULT_COOK_TIME,
    parse_recipe_content,
    split_lines,
)

RECIPE_CATEGORIES: Dict[str, str] = {
    "appetizers": "Appetizers",
    "main-entrees": "Main Entrees",
    "side-dishes": "Side Dishes",
    "soups-salads": "Soups & Salads",
    "breakfast": "Breakfast",
    "desserts": "Desserts",
    "beverages": "Beverages",
    "snacks": "Snacks",
}
DEFAULT_CATEGORY = "main-entrees"

RecipeCategory = Literal[
    "appetizers",
    "main-entrees",
    "side-dishes",
    "soups-salads",
    "breakfast",
    "desserts",
    "beverages",
    "snacks",
]
RecipeSource = Literal["generated", "user-added"]

# Minimum lengths for the separate free-text blocks of the "add recipe" form
USER_RECIPE_BLOCK_MIN_LENGTHS = {
    "recipe_description": 10,
    "ingredients": 10,
    "instructions": 20,
}
USER_RECIPE_CONTENT_MIN_LENGTH = 20


class GenerationRequest(CamelModel):
    """What the user wants to cook: time available, ingredients on hand, mood"""
    model_config = ConfigDict(str_strip_whitespace=True)

    cooking_time: str
    ingredients: str
    mood: str

    @field_validator("cooking_time")
    @classmethod
    def cooking_time_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Cooking time is required")
        return value

    @field_validator("ingredients")
    @classmethod
    def ingredients_detailed(cls, value: str) -> str:
        if len(value) < 3:
            raise ValueError("Please provide more details about your ingredients")
        return value

    @field_validator("mood")
    @classmethod
    def mood_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Mood is required")
        return value


class Recipe(CamelModel):
    """Single generated recipe"""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    cook_time: str = Field(..., min_length=1)
    ingredients: List[str] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)


class RecipeResponse(CamelModel):
    """Generation result: one to three recipes"""
    recipes: List[Recipe] = Field(..., min_length=1, max_length=3)


class SaveRecipeRequest(CamelModel):
    """Body of a save request. The owner is never read from here."""
    recipe_name: str = Field(..., min_length=1)
    recipe_description: str = Field(..., min_length=1)
    cook_time: str = Field(..., min_length=1)
    ingredients: List[str]
    instructions: List[str]
    category: RecipeCategory = DEFAULT_CATEGORY


class SavedRecipeInsert(SaveRecipeRequest):
    """Row about to be inserted, owner attached server-side"""
    user_id: str = Field(..., min_length=1)
    source: RecipeSource = "generated"


class UserRecipeForm(CamelModel):
    """
    Recipe typed in by the user.

    Either ``recipe_content`` (the whole recipe pasted as one text) or the
    separate description/ingredients/instructions blocks must be given.
    """
    recipe_name: str = Field(..., min_length=1)
    category: str = DEFAULT_CATEGORY
    cook_time: Optional[str] = None
    recipe_content: Optional[str] = None
    recipe_description: Optional[str] = Field(default=None, validate_default=True)
    ingredients: Optional[str] = Field(default=None, validate_default=True)
    instructions: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("category", mode="before")
    @classmethod
    def fallback_category(cls, value: Any) -> str:
        if not isinstance(value, str) or value not in RECIPE_CATEGORIES:
            return DEFAULT_CATEGORY
        return value

    @field_validator("recipe_content")
    @classmethod
    def content_has_steps(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return value
        if len(value.strip()) < USER_RECIPE_CONTENT_MIN_LENGTH:
            raise ValueError(
                f"Recipe must be at least {USER_RECIPE_CONTENT_MIN_LENGTH} characters"
            )
        if not parse_recipe_content(value).instructions:
            raise ValueError("Recipe must include at least one instruction step")
        return value

    @field_validator("recipe_description", "ingredients", "instructions")
    @classmethod
    def block_long_enough(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        content = info.data.get("recipe_content")
        if content and content.strip():
            return value
        minimum = USER_RECIPE_BLOCK_MIN_LENGTHS[info.field_name]
        if value is None or len(value.strip()) < minimum:
            raise ValueError(f"Must be at least {minimum} characters")
        return value

    @property
    def has_content(self) -> bool:
        return bool(self.recipe_content and self.recipe_content.strip())

    def to_insert(self, user_id: str) -> SavedRecipeInsert:
        """Row for the owner: free text split into lines, source "user-added"."""
        if self.has_content:
            parsed = parse_recipe_content(self.recipe_content)
            description = (self.recipe_description or "").strip() or parsed.description or self.recipe_name
            cook_time = (self.cook_time or "").strip() or parsed.cook_time or DEFAULT_COOK_TIME
            ingredients = parsed.ingredients or split_lines(self.ingredients)
            instructions = parsed.instructions
        else:
            description = self.recipe_description.strip()
            cook_time = (self.cook_time or "").strip() or DEFAULT_COOK_TIME
            ingredients = split_lines(self.ingredients)
            instructions = split_lines(self.instructions)

        return SavedRecipeInsert(
            user_id=user_id,
            recipe_name=self.recipe_name.strip(),
            recipe_description=description,
            cook_time=cook_time,
            ingredients=ingredients,
            instructions=instructions,
            category=self.category,
            source="user-added",
        )


class SavedRecipeResponse(CamelModel):
    """A recipe from the user's collection"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    recipe_name: str
    recipe_description: str
    cook_time: str
    ingredients: List[str]
    instructions: List[str]
    category: str
    source: str
    created_at: datetime


class CategoryResponse(CamelModel):
    value: str
    label: str


def _validate(model, data: Any):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(errors_from_pydantic(e.errors()))


def validate_generation_request(data: Any) -> GenerationRequest:
    return _validate(GenerationRequest, data)


def validate_recipe_response(data: Any) -> RecipeResponse:
    """Check a decoded model answer: an object with 1-3 complete recipes."""
    if not isinstance(data, dict):
        raise ValidationError([("recipes", "Response must be a JSON object")])
    return _validate(RecipeResponse, data)


def validate_saved_recipe_insert(data: Any, user_id: Optional[str]) -> SavedRecipeInsert:
    """
    Validate a save payload and attach the authenticated owner.

    Any userId in ``data`` is discarded.
    """
    if not user_id:
        raise ValidationError([("userId", "Authenticated user required")])
    if not isinstance(data, dict):
        raise ValidationError([("body", "Input should be a valid dictionary")])
    payload = {k: v for k, v in data.items() if k not in ("userId", "user_id")}
    payload["user_id"] = user_id
    return _validate(SavedRecipeInsert, payload)


def validate_user_recipe_form(data: Any) -> UserRecipeForm:
    return _validate(UserRecipeForm, data)
