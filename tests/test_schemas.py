"""
Unit tests for request/response validation.
"""
import pytest

from chronochef.core.exceptions import ValidationError
from chronochef.schemas.recipe import (
    validate_generation_request,
    validate_recipe_response,
    validate_saved_recipe_insert,
    validate_user_recipe_form,
)

from conftest import SAMPLE_RECIPES


def valid_recipe(**overrides):
    recipe = dict(SAMPLE_RECIPES["recipes"][0])
    recipe.update(overrides)
    return recipe


class TestGenerationRequest:
    def test_valid_request(self):
        request = validate_generation_request({
            "cookingTime": "30 minutes",
            "ingredients": "chicken, rice",
            "mood": "comfort food",
        })
        assert request.cooking_time == "30 minutes"
        assert request.ingredients == "chicken, rice"
        assert request.mood == "comfort food"

    def test_empty_cooking_time_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_generation_request({"cookingTime": "", "ingredients": "eggs", "mood": "quick"})
        assert exc_info.value.fields == ["cookingTime"]

    def test_short_ingredients_names_field(self):
        """Ingredients need at least 3 characters."""
        with pytest.raises(ValidationError) as exc_info:
            validate_generation_request({"cookingTime": "10 min", "ingredients": "ab", "mood": "quick"})
        assert exc_info.value.fields == ["ingredients"]
        assert "more details" in exc_info.value.errors[0][1]

    def test_whitespace_only_mood_is_empty(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_generation_request({"cookingTime": "10 min", "ingredients": "eggs", "mood": "   "})
        assert exc_info.value.fields == ["mood"]

    def test_missing_fields_all_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_generation_request({"ingredients": "eggs"})
        assert sorted(exc_info.value.fields) == ["cookingTime", "mood"]


class TestRecipeResponse:
    def test_valid_response(self):
        response = validate_recipe_response(SAMPLE_RECIPES)
        assert len(response.recipes) == 2
        assert response.recipes[0].cook_time == "25 minutes"

    def test_empty_recipe_list_rejected(self):
        with pytest.raises(ValidationError):
            validate_recipe_response({"recipes": []})

    def test_more_than_three_recipes_rejected(self):
        with pytest.raises(ValidationError):
            validate_recipe_response({"recipes": [valid_recipe() for _ in range(4)]})

    def test_missing_recipe_field_rejected(self):
        recipe = valid_recipe()
        del recipe["instructions"]
        with pytest.raises(ValidationError) as exc_info:
            validate_recipe_response({"recipes": [recipe]})
        assert exc_info.value.fields == ["recipes.0.instructions"]

    def test_wrong_types_rejected(self):
        with pytest.raises(ValidationError):
            validate_recipe_response({"recipes": [valid_recipe(ingredients="eggs, flour")]})
        with pytest.raises(ValidationError):
            validate_recipe_response({"recipes": [valid_recipe(name=42)]})

    def test_non_object_rejected(self):
        with pytest.raises(ValidationError):
            validate_recipe_response([SAMPLE_RECIPES])


class TestSavedRecipeInsert:
    def payload(self, **overrides):
        data = {
            "recipeName": "Pancakes",
            "recipeDescription": "Fluffy pancakes",
            "cookTime": "15 minutes",
            "ingredients": ["flour", "milk", "eggs"],
            "instructions": ["Mix", "Fry"],
        }
        data.update(overrides)
        return data

    def test_defaults(self):
        insert = validate_saved_recipe_insert(self.payload(), "user-1")
        assert insert.user_id == "user-1"
        assert insert.category == "main-entrees"
        assert insert.source == "generated"

    def test_client_user_id_ignored(self):
        """The owner always comes from the authenticated context."""
        insert = validate_saved_recipe_insert(self.payload(userId="someone-else"), "user-1")
        assert insert.user_id == "user-1"

    def test_missing_owner_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_saved_recipe_insert(self.payload(), None)
        assert exc_info.value.fields == ["userId"]

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_saved_recipe_insert(self.payload(category="brunch"), "user-1")
        assert exc_info.value.fields == ["category"]

    def test_ingredients_must_be_string_list(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_saved_recipe_insert(self.payload(ingredients="flour"), "user-1")
        assert exc_info.value.fields == ["ingredients"]


class TestUserRecipeForm:
    def test_separate_blocks(self):
        form = validate_user_recipe_form({
            "recipeName": "Tomato Soup",
            "recipeDescription": "A warming tomato soup.",
            "ingredients": "4 tomatoes\n1 onion",
            "instructions": "Roast the tomatoes.\nBlend with the onion.",
            "category": "soups-salads",
        })
        assert form.category == "soups-salads"
        assert not form.has_content

    def test_content_only(self):
        form = validate_user_recipe_form({
            "recipeName": "Cookies",
            "recipeContent": "Ingredients:\nflour\nsugar\nInstructions:\nMix and bake for 12 minutes.",
        })
        assert form.has_content

    def test_block_minimum_lengths(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_user_recipe_form({
                "recipeName": "Toast",
                "recipeDescription": "Toast",
                "ingredients": "bread",
                "instructions": "Toast it",
            })
        assert sorted(exc_info.value.fields) == ["ingredients", "instructions", "recipeDescription"]

    def test_invalid_category_falls_back(self):
        form = validate_user_recipe_form({
            "recipeName": "Cookies",
            "recipeContent": "Mix flour, sugar and butter, then bake.",
            "category": "not-a-category",
        })
        assert form.category == "main-entrees"

    def test_missing_category_defaults(self):
        form = validate_user_recipe_form({
            "recipeName": "Cookies",
            "recipeContent": "Mix flour, sugar and butter, then bake.",
        })
        assert form.category == "main-entrees"

    def test_content_without_steps_rejected(self):
        """Headings alone pass the length check but describe no recipe."""
        with pytest.raises(ValidationError) as exc_info:
            validate_user_recipe_form({
                "recipeName": "Empty",
                "recipeContent": "Ingredients:\nInstructions:\nMethod:\nSteps:",
            })
        assert exc_info.value.fields == ["recipeContent"]

    def test_content_with_only_ingredients_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_user_recipe_form({
                "recipeName": "Half a recipe",
                "recipeContent": "Ingredients:\n2 cups flour\n1 cup sugar\n3 eggs",
            })
        assert exc_info.value.fields == ["recipeContent"]
        assert "instruction" in exc_info.value.errors[0][1]
