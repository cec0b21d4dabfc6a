"""
Recipe generation service using OpenAI LLM.

Turns what the user has (time, ingredients, mood) into one to three
structured recipes. One outbound call per request: no caching, no retry.
"""
import json
import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from chronochef.core.config import get_settings
from chronochef.core.exceptions import (
    ServiceUnavailable,
    UpstreamError,
    UpstreamFormatError,
    ValidationError,
)
from chronochef.schemas.recipe import (
    GenerationRequest,
    RecipeResponse,
    validate_recipe_response,
)

logger = logging.getLogger(__name__)


RECIPE_GENERATION_PROMPT = """You are a professional chef and recipe creator. Generate 1-3 unique, creative recipes based on the user's requirements.

IMPORTANT: You must respond with valid JSON in exactly this format:
{{
  "recipes": [
    {{
      "name": "Recipe Name",
      "description": "Brief, appetizing description (1-2 sentences)",
      "cookTime": "cooking time estimate",
      "ingredients": ["ingredient 1", "ingredient 2", "ingredient 3"],
      "instructions": ["step 1", "step 2", "step 3"]
    }}
  ]
}}

Requirements:
- Cooking Time Available: {cooking_time}
- Available Ingredients: {ingredients}
- Desired Mood/Style: {mood}

Guidelines:
- Create 1-3 recipes that can be made within the specified time
- Use the provided ingredients as much as possible, but you can suggest additional common pantry items
- Match the mood/style requested (comfort food should be hearty, healthy should be nutritious, etc.)
- Provide clear, step-by-step instructions
- Make sure each recipe is unique and different from the others
- Keep ingredient lists practical and not overly long
- Instructions should be clear and easy to follow"""

USER_PROMPT = (
    "Please create personalized recipes for someone who has {cooking_time} to cook, "
    "has these ingredients: {ingredients}, and is in the mood for: {mood}"
)

# Structured output schema; the 1-3 bound is enforced again on our side
RECIPE_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "recipes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "cookTime": {"type": "string"},
                    "ingredients": {"type": "array", "items": {"type": "string"}},
                    "instructions": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["name", "description", "cookTime", "ingredients", "instructions"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["recipes"],
    "additionalProperties": False,
}


def build_prompts(request: GenerationRequest) -> tuple:
    """Return the (system, user) prompt pair for a request."""
    fields = {
        "cooking_time": request.cooking_time,
        "ingredients": request.ingredients,
        "mood": request.mood,
    }
    return RECIPE_GENERATION_PROMPT.format(**fields), USER_PROMPT.format(**fields)


class RecipeGenerationService:
    """
    Generates recipes through an OpenAI-compatible chat completions client.

    The client is passed in, so tests can hand over a fake. Without a client
    (no API key configured) every call fails with ServiceUnavailable.
    """

    def __init__(
        self,
        client: Optional[Any],
        model: str = "gpt-4o-mini",
        max_tokens: int = 2500,
        temperature: float = 0.7,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def generate_recipes(self, request: GenerationRequest) -> RecipeResponse:
        """
        Generate one to three recipes for a validated request.

        Raises:
            ServiceUnavailable: no API key configured, or the backend rejects it
            UpstreamFormatError: empty, non-JSON or non-conforming answer
            UpstreamError: any other failure of the call (timeouts included)
        """
        if self.client is None:
            logger.error("Recipe generation requested but OPENAI_API_KEY is not configured")
            raise ServiceUnavailable("OPENAI_API_KEY is not configured")

        system_prompt, user_prompt = build_prompts(request)
        logger.info(
            "Generating recipes (model=%s, cooking_time=%r, mood=%r)",
            self.model, request.cooking_time, request.mood,
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "recipe_response",
                        "schema": RECIPE_RESPONSE_SCHEMA,
                        "strict": True,
                    },
                },
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            logger.error("OpenAI rejected credentials: %s", e)
            raise ServiceUnavailable(f"OpenAI credentials rejected: {e}")
        except openai.APITimeoutError as e:
            logger.error("OpenAI request timed out: %s", e)
            raise UpstreamError(f"OpenAI request timed out: {e}")
        except Exception as e:
            logger.error("OpenAI API error: %s", e)
            raise UpstreamError(f"OpenAI API error: {e}")

        content = self._extract_content(response)
        if not content or not content.strip():
            logger.error("Empty response from OpenAI")
            raise UpstreamFormatError("Empty response from OpenAI")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse OpenAI response as JSON: %s", e)
            raise UpstreamFormatError(f"Failed to parse response: {e}")

        try:
            result = validate_recipe_response(data)
        except ValidationError as e:
            logger.error("OpenAI response failed validation: %s", e.detail)
            raise UpstreamFormatError(f"Response failed validation: {e.detail}")

        logger.info("Generated %d recipe(s)", len(result.recipes))
        return result

    def _extract_content(self, response: Any) -> Optional[str]:
        try:
            return response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            return None


def get_recipe_generation_service() -> RecipeGenerationService:
    """
    FastAPI dependency: a generator wired to the configured OpenAI account.

    Never raises, so request validation runs before any configuration error.
    """
    settings = get_settings()
    client = None
    if settings.openai_api_key:
        client = OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )
    return RecipeGenerationService(
        client=client,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
        temperature=settings.openai_temperature,
    )
