"""
Pydantic models for recipes stored in Firestore and suggested by Gemini
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class RecipeBase(BaseModel):
    """Base recipe model."""
    name: str = Field(..., description="Recipe name")
    ingredients: str = Field(..., description="Ingredients, one per line")
    instructions: str = Field(..., description="Cooking instructions")

    @property
    def ingredient_lines(self) -> List[str]:
        """Non-blank ingredient lines, stripped."""
        return [line.strip() for line in self.ingredients.split("\n") if line.strip()]


class RecipeCreate(RecipeBase):
    """Model for creating a new recipe."""
    pass


class Recipe(RecipeBase):
    """Recipe model with store-assigned ID and server timestamp."""
    id: str = Field(..., description="Document ID")
    created_at: Optional[datetime] = Field(None, description="Server-assigned creation time")


class GeneratedRecipe(BaseModel):
    """Recipe payload returned by the generative-AI endpoint."""
    recipe_name: str = Field(..., alias="recipeName", description="Suggested recipe name")
    ingredients: List[str] = Field(default=[], description="One string per ingredient line")
    instructions: str = Field(..., description="Step-by-step instructions")

    class Config:
        populate_by_name = True

    @property
    def instruction_steps(self) -> List[str]:
        return [step for step in self.instructions.split("\n") if step.strip()]

    def to_recipe_create(self) -> RecipeCreate:
        """Convert into the stored shape; ingredients are joined with newlines."""
        return RecipeCreate(
            name=self.recipe_name,
            ingredients="\n".join(self.ingredients),
            instructions=self.instructions,
        )
