"""
View controller - the single state container behind the four screens

Holds the current view, form fields, AI generation state and the modal, and
turns button presses into store / generator calls.
"""
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from loguru import logger
from pydantic import BaseModel

from src.ai.flows.generate_recipe import (
    EmptyPromptError,
    UnexpectedResponseError,
    generate_recipe,
)
from src.db.models import GeneratedRecipe, Recipe, RecipeCreate
from src.services.recipe_store import RecipeStore


class View(str, Enum):
    """Mutually exclusive screens."""
    HOME = "home"
    ADD_RECIPE = "addRecipe"
    GENERATE_AI = "generateAi"
    VIEW_RECIPES = "viewRecipes"


class Modal(BaseModel):
    """Alert (OK) or confirm (Yes/Cancel) dialog."""
    message: str
    is_confirm: bool = False
    pending_delete_id: Optional[str] = None


class RecipeForm(BaseModel):
    name: str = ""
    ingredients: str = ""
    instructions: str = ""

    def is_complete(self) -> bool:
        return bool(self.name.strip() and self.ingredients.strip() and self.instructions.strip())


Generator = Callable[[str], Awaitable[GeneratedRecipe]]


class ViewController:
    """State machine for the single-page app."""

    def __init__(
        self,
        store: Optional[RecipeStore] = None,
        generator: Optional[Generator] = None,
        is_auth_ready: bool = True,
    ):
        self.store = store
        self.generator = generate_recipe if generator is None else generator
        self.is_auth_ready = is_auth_ready

        self.current_view: View = View.HOME
        self.form = RecipeForm()

        self.ai_prompt: str = ""
        self.ai_loading: bool = False
        self.ai_generated_recipe: Optional[GeneratedRecipe] = None
        self.ai_error: str = ""

        self.modal: Optional[Modal] = None

    @property
    def recipes(self) -> List[Recipe]:
        return self.store.recipes if self.store is not None else []

    @property
    def has_session(self) -> bool:
        return self.store is not None and bool(self.store.user_id)

    # Navigation and modal

    def navigate(self, view: View) -> None:
        self.current_view = View(view)

    def show_alert(self, message: str) -> None:
        self.modal = Modal(message=message)

    def show_confirm(self, message: str, pending_delete_id: str) -> None:
        self.modal = Modal(message=message, is_confirm=True, pending_delete_id=pending_delete_id)

    def close_modal(self) -> None:
        """OK / Cancel: dismiss and drop any pending action."""
        self.modal = None

    def confirm_modal(self) -> None:
        modal = self.modal
        self.modal = None
        if modal is not None and modal.is_confirm and modal.pending_delete_id:
            self._delete_recipe(modal.pending_delete_id)

    # Recipes

    def add_recipe(self, recipe_data: RecipeCreate) -> Optional[Recipe]:
        if not self.has_session:
            logger.error("Firestore DB or User ID not available.")
            self.show_alert("Firestore DB or User ID not available. Please try again.")
            return None

        try:
            recipe = self.store.create(recipe_data)
        except Exception as e:
            logger.exception("Error adding document")
            self.show_alert(f"Error adding recipe: {e}")
            return None

        self.form = RecipeForm()
        self.ai_generated_recipe = None
        self.show_alert("Recipe added successfully!")
        self.current_view = View.VIEW_RECIPES
        return recipe

    def submit_recipe(self, name: str, ingredients: str, instructions: str) -> Optional[Recipe]:
        self.form = RecipeForm(name=name, ingredients=ingredients, instructions=instructions)
        if not self.form.is_complete():
            self.show_alert("Please fill in all recipe fields.")
            return None
        return self.add_recipe(RecipeCreate(**self.form.model_dump()))

    def request_delete(self, recipe_id: str) -> None:
        self.show_confirm("Are you sure you want to delete this recipe?", recipe_id)

    def _delete_recipe(self, recipe_id: str) -> None:
        if not self.has_session:
            logger.error("Firestore DB or User ID not available.")
            self.show_alert("Firestore DB or User ID not available. Cannot delete recipe.")
            return

        try:
            self.store.delete(recipe_id)
        except Exception as e:
            logger.exception("Error deleting document")
            self.show_alert(f"Error deleting recipe: {e}")
            return

        self.show_alert("Recipe deleted successfully!")

    # AI generation

    async def generate_ai_recipe(self, prompt: str) -> Optional[GeneratedRecipe]:
        if self.ai_loading:
            # One request at a time
            return None

        self.ai_prompt = prompt
        if not prompt.strip():
            self.ai_error = str(EmptyPromptError())
            return None

        self.ai_loading = True
        self.ai_generated_recipe = None
        self.ai_error = ""

        try:
            self.ai_generated_recipe = await self.generator(prompt)
        except UnexpectedResponseError as e:
            self.ai_error = str(e)
        except Exception as e:
            logger.error(f"Error generating AI recipe: {e}")
            self.ai_error = (
                f"Error generating AI recipe: {e}. This might be a network issue or an "
                "invalid API key. Please check your internet connection and API key settings."
            )
        finally:
            self.ai_loading = False

        return self.ai_generated_recipe

    def add_ai_recipe(self) -> Optional[Recipe]:
        if self.ai_generated_recipe is None:
            return None
        return self.add_recipe(self.ai_generated_recipe.to_recipe_create())
