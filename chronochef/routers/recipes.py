import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from chronochef.core.exceptions import ValidationError
from chronochef.core.security import get_current_user
from chronochef.schemas.recipe import (
    RECIPE_CATEGORIES,
    CategoryResponse,
    GenerationRequest,
    RecipeResponse,
    SavedRecipeResponse,
    SaveRecipeRequest,
    UserRecipeForm,
    validate_saved_recipe_insert,
)
from chronochef.services.recipe.recipe_generation import (
    RecipeGenerationService,
    get_recipe_generation_service,
)
from chronochef.services.storage import RecipeStore, get_recipe_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("/generate", response_model=RecipeResponse)
def generate_recipes(
    request: GenerationRequest,
    service: RecipeGenerationService = Depends(get_recipe_generation_service),
):
    """
    Generate one to three recipes from cooking time, ingredients and mood.

    Open to anonymous callers. Nothing is stored; the client decides what
    to save afterwards.
    """
    return service.generate_recipes(request)


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories():
    """Categories a saved recipe can be filed under"""
    return [CategoryResponse(value=value, label=label) for value, label in RECIPE_CATEGORIES.items()]


@router.post("/save", response_model=SavedRecipeResponse, status_code=201)
def save_recipe(
    request: SaveRecipeRequest,
    store: RecipeStore = Depends(get_recipe_store),
    user_id: str = Depends(get_current_user),
):
    """Save a generated recipe to the caller's collection."""
    insert = validate_saved_recipe_insert(request.model_dump(), user_id)
    return store.save_recipe(insert)


@router.post("/add", response_model=SavedRecipeResponse, status_code=201)
def add_recipe(
    form: UserRecipeForm,
    store: RecipeStore = Depends(get_recipe_store),
    user_id: str = Depends(get_current_user),
):
    """
    Add a recipe written by the user.

    Accepts either the whole recipe pasted as ``recipeContent`` or separate
    description / ingredients / instructions text blocks, one item per line.
    """
    return store.add_user_recipe(form, user_id)


@router.get("/saved", response_model=List[SavedRecipeResponse])
def get_saved_recipes(
    category: Optional[str] = Query(default=None),
    store: RecipeStore = Depends(get_recipe_store),
    user_id: str = Depends(get_current_user),
):
    """
    Get the caller's saved recipes, oldest first.

    Optional ``category`` narrows the list to one category.
    """
    if category is not None and category not in RECIPE_CATEGORIES:
        raise ValidationError([("category", f"Unknown category '{category}'")])
    return store.get_saved_recipes_by_category(user_id, category)


@router.get("/saved/{owner_id}", response_model=List[SavedRecipeResponse])
def get_saved_recipes_for_owner(
    owner_id: str,
    store: RecipeStore = Depends(get_recipe_store),
    user_id: str = Depends(get_current_user),
):
    """
    Older clients put the owner in the path. The session decides: a
    different id gets an empty list.
    """
    if owner_id != user_id:
        logger.warning("User %s requested saved recipes of %s", user_id, owner_id)
        return []
    return store.get_saved_recipes(user_id)


@router.delete("/saved/{recipe_id}")
def delete_saved_recipe(
    recipe_id: int,
    store: RecipeStore = Depends(get_recipe_store),
    user_id: str = Depends(get_current_user),
):
    """
    Remove a recipe from the caller's collection.

    Unknown ids and other users' recipes are silently ignored.
    """
    store.delete_saved_recipe(recipe_id, user_id)
    return {"message": "Recipe deleted successfully"}


@router.delete("/saved/{recipe_id}/{owner_id}")
def delete_saved_recipe_for_owner(
    recipe_id: int,
    owner_id: str,
    store: RecipeStore = Depends(get_recipe_store),
    user_id: str = Depends(get_current_user),
):
    """Owner-in-path variant of delete, cross-checked against the session"""
    if owner_id != user_id:
        logger.warning("User %s tried to delete recipe %s of %s", user_id, recipe_id, owner_id)
    else:
        store.delete_saved_recipe(recipe_id, user_id)
    return {"message": "Recipe deleted successfully"}
