"""
FastAPI Application for Recipe Rack
Serves the single-page cookbook screens and a JSON API over the same operations
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field
import uvicorn

from src import config
from src.ai.flows.generate_recipe import EmptyPromptError, RecipeGenerationError
from src.auth import AuthSession
from src.db.models import GeneratedRecipe, Recipe, RecipeCreate
from src.logger import configure_logging, logger
from src.services.recipe_store import RecipeStore, SessionUnavailableError
from src.services.view_controller import View, ViewController


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    session = await AuthSession().bootstrap()
    store = RecipeStore(session.user_id)
    if session.user_id:
        try:
            store.start()
        except Exception as e:
            logger.error(f"Could not subscribe to recipes: {e}")
            # Fall back to a one-off read
            try:
                store.refresh()
            except Exception as e:
                logger.error(f"Error fetching recipes: {e}")

    app.state.controller = ViewController(store=store, is_auth_ready=session.is_ready)
    try:
        yield
    finally:
        store.stop()


# Initialize FastAPI app
app = FastAPI(
    title="Recipe Rack",
    description="Your personal cookbook, powered by AI",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_controller(request: Request) -> ViewController:
    return request.app.state.controller


def back_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


# ========== SCREENS ==========

@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render the current view and any open modal."""
    controller = get_controller(request)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"app": controller, "View": View},
    )


@app.post("/view/{view}")
async def navigate(request: Request, view: str):
    try:
        target = View(view)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown view: {view}")
    get_controller(request).navigate(target)
    return back_home()


@app.post("/recipes")
async def submit_recipe(
    request: Request,
    name: str = Form(""),
    ingredients: str = Form(""),
    instructions: str = Form(""),
):
    get_controller(request).submit_recipe(name, ingredients, instructions)
    return back_home()


@app.post("/recipes/{recipe_id}/delete")
async def request_delete(request: Request, recipe_id: str):
    get_controller(request).request_delete(recipe_id)
    return back_home()


@app.post("/ai/generate")
async def generate_ai_recipe(request: Request, prompt: str = Form("")):
    await get_controller(request).generate_ai_recipe(prompt)
    return back_home()


@app.post("/ai/accept")
async def add_ai_recipe(request: Request):
    get_controller(request).add_ai_recipe()
    return back_home()


@app.post("/modal/confirm")
async def confirm_modal(request: Request):
    get_controller(request).confirm_modal()
    return back_home()


@app.post("/modal/close")
async def close_modal(request: Request):
    get_controller(request).close_modal()
    return back_home()


# ========== JSON API ==========

class GenerateRecipeRequest(BaseModel):
    """Request schema for AI recipe generation."""
    prompt: str = Field(..., description="Free-text description of the desired recipe")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "Recipe Rack API",
        "version": "1.0.0"
    }


def get_store(request: Request) -> RecipeStore:
    store = get_controller(request).store
    if store is None or not store.user_id:
        raise HTTPException(status_code=503, detail="Firestore DB or User ID not available.")
    return store


@app.get("/api/recipes", response_model=List[Recipe])
async def list_recipes(request: Request):
    """Latest snapshot of the user's recipes, newest first."""
    store = get_store(request)
    if store.is_subscribed:
        return store.recipes
    try:
        return store.refresh()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching recipes: {str(e)}")


@app.post("/api/recipes", response_model=Recipe, status_code=201)
async def create_recipe(request: Request, recipe_data: RecipeCreate):
    """Add a recipe."""
    store = get_store(request)
    try:
        return store.create(recipe_data)
    except SessionUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding recipe: {str(e)}")


@app.delete("/api/recipes/{recipe_id}", status_code=204)
async def delete_recipe(request: Request, recipe_id: str):
    """Delete a recipe."""
    store = get_store(request)
    try:
        deleted = store.delete(recipe_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting recipe: {str(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return None


@app.post(
    "/api/generate-recipe",
    response_model=GeneratedRecipe,
    response_model_by_alias=True,
    summary="Generate Recipe",
    description="Ask Gemini for a recipe matching the prompt. The result is not saved."
)
async def api_generate_recipe(request: Request, input_data: GenerateRecipeRequest):
    generator = get_controller(request).generator
    try:
        return await generator(input_data.prompt)
    except EmptyPromptError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecipeGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))


# Run the application
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=True,
        log_level="info"
    )
