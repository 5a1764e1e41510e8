# CRUD operations module
from src.db.crud.recipes import RecipeCRUD

__all__ = [
    "RecipeCRUD",
]
