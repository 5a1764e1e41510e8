"""
Recipe store - keeps the signed-in user's recipes in sync with Firestore
"""
from typing import List, Optional

from loguru import logger

from src.db.crud.recipes import RecipeCRUD
from src.db.models import Recipe, RecipeCreate


class SessionUnavailableError(RuntimeError):
    """Raised when the store is used before a user session exists."""


class RecipeStore:
    """Live, per-user view of the recipes collection."""

    def __init__(self, user_id: Optional[str]):
        self.user_id = user_id
        self._recipes: List[Recipe] = []
        self._watch = None

    @property
    def recipes(self) -> List[Recipe]:
        return self._recipes

    @property
    def is_subscribed(self) -> bool:
        return self._watch is not None

    def _require_user(self) -> str:
        if not self.user_id:
            raise SessionUnavailableError("Firestore DB or User ID not available.")
        return self.user_id

    def _on_recipes(self, recipes: List[Recipe]) -> None:
        # Replace the reference so readers never see a half-built list
        self._recipes = recipes
        logger.debug(f"Recipes snapshot: {len(recipes)} recipe(s)")

    def start(self) -> None:
        """Subscribe to the user's collection."""
        user_id = self._require_user()
        if self._watch is None:
            self._watch = RecipeCRUD.subscribe(user_id, self._on_recipes)
            logger.info(f"Subscribed to recipes for user {user_id}")

    def stop(self) -> None:
        if self._watch is not None:
            self._watch.unsubscribe()
            self._watch = None

    def refresh(self) -> List[Recipe]:
        """One-shot read, for when no listener is running."""
        self._on_recipes(RecipeCRUD.list_by_user(self._require_user()))
        return self._recipes

    def create(self, recipe_data: RecipeCreate) -> Recipe:
        return RecipeCRUD.create(self._require_user(), recipe_data)

    def delete(self, recipe_id: str) -> bool:
        return RecipeCRUD.delete(self._require_user(), recipe_id)
