import contextlib
import functools
import logging
from typing import Any, Awaitable, Callable

from databases import Database
from jinja2 import Environment, FileSystemLoader, select_autoescape
from rich.logging import RichHandler
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Route

import config
import db
from app.html.recipe_detail import RecipeDetail
from domain.aopenai import CompletionClient, GenerationError
from domain.models import Profile
from domain.services import (
    EmptyFridge,
    GenerationInProgress,
    InFlightGuard,
    create_recipe,
)


logger = logging.getLogger(__name__)


CONFIG = config.Config()


GENERATION_FAILED = "Tarif oluşturulurken bir sorun oluştu."


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def aJSONResponse(route: Callable[..., Awaitable[Any]]):
    @functools.wraps(route)
    async def wrapper(*args: Any, **kwargs: Any) -> JSONResponse:
        resp = await route(*args, **kwargs)
        if not isinstance(resp, tuple):
            content, code = resp, 200
        else:
            content, code = resp
        return JSONResponse(content, status_code=code)

    return wrapper


async def json_body(request: Request) -> dict[str, Any]:
    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object.")
    return data


def string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{key} must be a list of strings.")
    return value


@aJSONResponse
async def list_fridge(request: Request) -> list[dict[str, str]]:
    items = await request.app.state.fridge.list(request.path_params["user_id"])
    return [i.to_dict() for i in items]


@aJSONResponse
async def add_fridge_item(request: Request) -> tuple[dict[str, str], int]:
    data = await json_body(request)
    item = await request.app.state.fridge.add(
        request.path_params["user_id"],
        str(data.get("name", "")),
        str(data.get("quantity", "")),
    )
    return item.to_dict(), 201


async def fridge_item(request: Request) -> Response:
    fridge: db.FridgeItemsRepository = request.app.state.fridge
    user_id = request.path_params["user_id"]
    id = request.path_params["item_id"]
    match request.method.lower():
        case "put":
            data = await json_body(request)
            item = await fridge.update(
                user_id,
                id,
                str(data.get("name", "")),
                str(data.get("quantity", "")),
            )
            return JSONResponse(item.to_dict())
        case "delete":
            await fridge.delete(user_id, id)
            return Response(status_code=204)
        case _:
            raise ValueError("Unsupported method.")


@aJSONResponse
async def profile(request: Request) -> dict[str, Any]:
    profiles: db.ProfilesRepository = request.app.state.profiles
    user_id = request.path_params["user_id"]
    if request.method.lower() == "get":
        return (await profiles.get(user_id)).to_dict()

    data = await json_body(request)
    saved = await profiles.save(
        Profile(
            user_id=user_id,
            diet_preferences=string_list(data, "dietPreferences"),
            allergies=string_list(data, "allergies"),
            other_allergies=str(data.get("otherAllergies", "")),
        )
    )
    return saved.to_dict()


@aJSONResponse
async def list_recipes(request: Request) -> list[dict[str, Any]]:
    recipes = await request.app.state.recipes.list(request.path_params["user_id"])
    return [r.to_dict() for r in recipes]


@aJSONResponse
async def new_recipe(request: Request) -> tuple[dict[str, Any], int]:
    data = await json_body(request)
    state = request.app.state
    recipe = await create_recipe(
        request.path_params["user_id"],
        query=str(data.get("query", "")),
        fridge=state.fridge,
        profiles=state.profiles,
        recipes=state.recipes,
        client=state.client,
        guard=state.guard,
    )
    return recipe.to_dict(), 201


async def recipe_detail(request: Request) -> Response:
    recipes: db.RecipesRepository = request.app.state.recipes
    id = request.path_params["id"]
    match request.method.lower():
        case "get":
            recipe = await recipes.get(id)
            detail = RecipeDetail(recipe, environment=request.app.state.templates)
            return HTMLResponse(detail.render())
        case "patch":
            data = await json_body(request)
            recipe = await recipes.rename(id, str(data.get("title", "")))
            return JSONResponse(recipe.to_dict())
        case "delete":
            await recipes.delete(id)
            return Response(status_code=204)
        case _:
            raise ValueError("Unsupported method.")


async def bad_request(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc) or exc.__class__.__name__}, status_code=400)


async def empty_fridge(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        {"error": "Buzdolabınızda ürün bulunmuyor. Önce ürün ekleyin."},
        status_code=400,
    )


async def not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": f"Not found: {exc}"}, status_code=404)


async def in_progress(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        {"error": "A recipe is already being generated."}, status_code=409
    )


async def generation_failed(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Recipe generation failed", exc_info=exc)
    return JSONResponse({"error": GENERATION_FAILED}, status_code=502)


ROUTES = [
    Route("/users/{user_id}/fridge", list_fridge, methods=["GET"]),
    Route("/users/{user_id}/fridge", add_fridge_item, methods=["POST"]),
    Route("/users/{user_id}/fridge/{item_id}", fridge_item, methods=["PUT", "DELETE"]),
    Route("/users/{user_id}/profile", profile, methods=["GET", "PUT"]),
    Route("/users/{user_id}/recipes", list_recipes, methods=["GET"]),
    Route("/users/{user_id}/recipes", new_recipe, methods=["POST"]),
    Route("/recipes/{id}", recipe_detail, methods=["GET", "PATCH", "DELETE"]),
]


def build_app(
    cfg: config.Config,
    *,
    client: CompletionClient | None = None,
) -> Starlette:
    database = Database(cfg.db_url)
    client = (
        CompletionClient(
            url=cfg.openai_api_url,
            token=cfg.openai_api_key,
            model=cfg.core_model,
            timeout=cfg.completion_timeout,
        )
        if client is None
        else client
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        await database.connect()
        await db.create_db(database)
        yield
        await database.disconnect()
        await client.aclose()

    app = Starlette(
        debug=True if cfg.env == config.Env.local else False,
        routes=ROUTES,
        lifespan=lifespan,
        exception_handlers={
            ValueError: bad_request,
            EmptyFridge: empty_fridge,
            db.FridgeItemNotFound: not_found,
            db.RecipeNotFound: not_found,
            GenerationInProgress: in_progress,
            GenerationError: generation_failed,
        },
    )

    app.state.fridge = db.FridgeItemsRepository(database)
    app.state.profiles = db.ProfilesRepository(database)
    app.state.recipes = db.RecipesRepository(database)
    app.state.client = client
    app.state.guard = InFlightGuard()
    app.state.templates = Environment(
        loader=FileSystemLoader(cfg.html_dir),
        autoescape=select_autoescape(),
    )
    return app


setup_logging(CONFIG.log_level)
app = build_app(CONFIG)
