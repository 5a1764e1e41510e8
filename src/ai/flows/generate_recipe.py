"""
Generate Recipe Flow
Asks Gemini for a recipe matching a free-text prompt, constrained to a JSON schema.
"""
import json
from typing import Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from src.ai.gemini import generate_content
from src.db.models import GeneratedRecipe


PROMPT_TEMPLATE = (
    'Generate a recipe based on the following prompt: "{prompt}". '
    'Provide the response as a JSON object with the following structure: '
    '{{ "recipeName": "string", "ingredients": ["string"], "instructions": "string" }}. '
    "Ensure ingredients is an array of strings, where each string is one ingredient line. "
    "Make the instructions very detailed, providing clear, step-by-step guidance."
)

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "recipeName": {"type": "STRING"},
        "ingredients": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
        },
        "instructions": {"type": "STRING"},
    },
    "propertyOrdering": ["recipeName", "ingredients", "instructions"],
}


class RecipeGenerationError(Exception):
    """Base class for every generation failure; str() is the user-facing message."""


class EmptyPromptError(RecipeGenerationError):
    def __init__(self, message: str = "Please enter a prompt for the AI recipe."):
        super().__init__(message)


class GenerationHTTPError(RecipeGenerationError):
    """Non-2xx status or transport failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnexpectedResponseError(RecipeGenerationError):
    def __init__(self, message: str = "Could not generate a recipe. Please try again."):
        super().__init__(message)


class MalformedRecipeError(RecipeGenerationError):
    """Candidate text is not JSON or does not fit the recipe schema."""


def build_payload(prompt: str) -> dict:
    return {
        "contents": [
            {"role": "user", "parts": [{"text": PROMPT_TEMPLATE.format(prompt=prompt)}]}
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def extract_text(result: dict) -> Optional[str]:
    """candidates[0].content.parts[0].text, or None when any step is missing or mistyped."""
    candidates = result.get("candidates") if isinstance(result, dict) else None
    if not candidates or not isinstance(candidates, list):
        return None
    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not parts or not isinstance(parts, list) or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


def parse_recipe(text: str) -> GeneratedRecipe:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRecipeError(f"Response was not valid JSON ({e.msg})") from e

    try:
        return GeneratedRecipe.model_validate(data)
    except ValidationError as e:
        raise MalformedRecipeError(
            f"Response did not match the recipe schema ({e.error_count()} error(s))"
        ) from e


async def generate_recipe(
    prompt: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> GeneratedRecipe:
    """
    Generate a recipe from a free-text prompt.

    Args:
        prompt: What the user wants to cook
        api_key: Gemini API key (defaults to GEMINI_API_KEY)
        model: Gemini model name (defaults to GEMINI_MODEL)
        client: Optional httpx client, mostly for tests

    Returns:
        GeneratedRecipe parsed from the structured response

    Raises:
        RecipeGenerationError: One subclass per failure category
    """
    if not prompt or not prompt.strip():
        raise EmptyPromptError()

    try:
        response = await generate_content(
            build_payload(prompt), api_key=api_key, model=model, client=client
        )
    except httpx.HTTPError as e:
        logger.error(f"Error calling Gemini API: {e!r}")
        raise GenerationHTTPError(f"Network error: {e}") from e

    if not response.is_success:
        if response.status_code == 403:
            raise GenerationHTTPError(
                "Authorization error (403): Please ensure your API key has access to the Gemini API.",
                status_code=403,
            )
        raise GenerationHTTPError(
            f"HTTP error! Status: {response.status_code} - {response.reason_phrase}",
            status_code=response.status_code,
        )

    try:
        result = response.json()
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise MalformedRecipeError(f"Response body was not valid JSON ({e})") from e

    text = extract_text(result)
    if text is None:
        logger.error(f"Unexpected API response structure: {result}")
        raise UnexpectedResponseError()

    return parse_recipe(text)
