"""
CRUD operations for a user's recipes subcollection
"""
from typing import Callable, List
from datetime import datetime, timezone

from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from loguru import logger

from src import config
from src.db.firestore import get_db
from src.db.models import Recipe, RecipeCreate

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def recipe_from_snapshot(doc) -> Recipe:
    """Map a Firestore document snapshot to a Recipe."""
    data = doc.to_dict() or {}
    return Recipe(
        id=doc.id,
        name=data.get("name", ""),
        ingredients=data.get("ingredients", ""),
        instructions=data.get("instructions", ""),
        created_at=data.get("createdAt"),
    )


def _created_at_key(recipe: Recipe) -> datetime:
    created_at = recipe.created_at
    if created_at is None:
        return EPOCH
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at


def sort_recipes(recipes: List[Recipe]) -> List[Recipe]:
    """Newest first; recipes still waiting on a server timestamp go last."""
    return sorted(recipes, key=_created_at_key, reverse=True)


class RecipeCRUD:
    """CRUD operations for the per-user recipes subcollection."""

    ARTIFACTS_COLLECTION = "artifacts"
    USERS_COLLECTION = "users"
    RECIPES_SUBCOLLECTION = "recipes"

    @staticmethod
    def collection(user_id: str):
        """
        Reference to artifacts/{app_id}/users/{user_id}/recipes.

        Args:
            user_id: User ID

        Returns:
            Firestore collection reference
        """
        return (
            get_db()
            .collection(RecipeCRUD.ARTIFACTS_COLLECTION)
            .document(config.APP_ID)
            .collection(RecipeCRUD.USERS_COLLECTION)
            .document(user_id)
            .collection(RecipeCRUD.RECIPES_SUBCOLLECTION)
        )

    @staticmethod
    def create(user_id: str, recipe_data: RecipeCreate) -> Recipe:
        """
        Add a recipe document; Firestore assigns the ID and the timestamp.

        Args:
            user_id: User ID
            recipe_data: Recipe creation data

        Returns:
            Created recipe (created_at is unknown until the server echoes it)
        """
        _, doc_ref = RecipeCRUD.collection(user_id).add({
            "name": recipe_data.name,
            "ingredients": recipe_data.ingredients,
            "instructions": recipe_data.instructions,
            "createdAt": SERVER_TIMESTAMP,
        })

        return Recipe(id=doc_ref.id, **recipe_data.model_dump())

    @staticmethod
    def list_by_user(user_id: str) -> List[Recipe]:
        """
        List all recipes for a user, newest first.

        Args:
            user_id: User ID

        Returns:
            List of recipes
        """
        docs = RecipeCRUD.collection(user_id).get()
        return sort_recipes([recipe_from_snapshot(doc) for doc in docs])

    @staticmethod
    def delete(user_id: str, recipe_id: str) -> bool:
        """
        Delete a recipe.

        Args:
            user_id: User ID
            recipe_id: Recipe document ID

        Returns:
            True if deleted, False if not found
        """
        doc_ref = RecipeCRUD.collection(user_id).document(recipe_id)
        doc = doc_ref.get()

        if not doc.exists:
            return False

        doc_ref.delete()
        return True

    @staticmethod
    def subscribe(user_id: str, callback: Callable[[List[Recipe]], None]):
        """
        Listen to the user's recipes.

        The callback receives the full, sorted list on every change. It runs on
        the Firestore listener thread.

        Args:
            user_id: User ID
            callback: Called with the latest list of recipes

        Returns:
            Watch handle; call unsubscribe() to stop listening
        """
        def on_snapshot(docs, changes, read_time):
            try:
                callback(sort_recipes([recipe_from_snapshot(doc) for doc in docs]))
            except Exception as e:
                logger.error(f"Error fetching recipes: {e}")

        return RecipeCRUD.collection(user_id).on_snapshot(on_snapshot)
