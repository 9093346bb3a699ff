from __future__ import annotations

import contextlib
import logging
from functools import partial

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .auth.dependencies import require_user
from .auth.tokens import Identity, issue_token
from .config import DEFAULT_APP_CONFIG, AppConfig
from .db import Datastore
from .errors import InternalError, NotFoundError, RecipeRouletteError
from .images.config import DEFAULT_IMAGE_CONFIG, ImageConfig
from .images.cache import CachedImageLookup
from .images.pixabay import find_image_url
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .llm.groq_client import generate_text
from .llm.models import GenerateTextRequest, GenerateTextResponse
from .recipes.cuisines import CuisineCatalogue
from .recipes.models import (
    ALL_CUISINES,
    ALL_DIETS,
    CuisineListResponse,
    CuisineOut,
    RecipeCreatedResponse,
    RecipeCreateRequest,
    RecipeDetailResponse,
    RecipeListResponse,
)
from .recipes.query import RecipeQueryEngine
from .recipes.service import RecipeService
from .reviews.aggregator import ReviewAggregator
from .reviews.models import (
    RecipeReviewsResponse,
    ReviewCreatedResponse,
    ReviewCreateRequest,
    ReviewDeletedResponse,
    UserReviewsResponse,
)
from .users.models import (
    BioResponse,
    BioUpdateRequest,
    BioUpdateResponse,
    JoinDateResponse,
    LoginRequest,
    LoginResponse,
    ProfileRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
    UserResponse,
)
from .users.profile import build_profile, format_join_date
from .users.service import UserService

logger = logging.getLogger(__name__)


# ── Error rendering ─────────────────────────────────────────────────────


async def _domain_error(request: Request, exc: RecipeRouletteError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "Invalid input."})


async def _datastore_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Datastore failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": InternalError.default_message})


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": InternalError.default_message})


# ── Component accessors ─────────────────────────────────────────────────


def _users(request: Request) -> UserService:
    return request.app.state.users


def _cuisines(request: Request) -> CuisineCatalogue:
    return request.app.state.cuisines


def _query(request: Request) -> RecipeQueryEngine:
    return request.app.state.query


def _recipes(request: Request) -> RecipeService:
    return request.app.state.recipes


def _reviews(request: Request) -> ReviewAggregator:
    return request.app.state.reviews


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    datastore: Datastore = app.state.datastore
    datastore.create_schema()
    datastore.seed_cuisines(app.state.config.seed_cuisines)
    yield
    if app.state.owns_datastore:
        datastore.dispose()


def create_app(
    config: AppConfig = DEFAULT_APP_CONFIG,
    datastore: Datastore | None = None,
    image_config: ImageConfig = DEFAULT_IMAGE_CONFIG,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> FastAPI:
    app = FastAPI(
        title="Recipe Roulette API",
        version="1.0.0",
        docs_url=config.docs_url,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RecipeRouletteError, _domain_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(SQLAlchemyError, _datastore_error)
    app.add_exception_handler(Exception, _unexpected_error)

    # One datastore handle per process, shared by every component
    app.state.owns_datastore = datastore is None
    if datastore is None:
        datastore = Datastore(config.database_url)
    cuisines = CuisineCatalogue(datastore)
    query = RecipeQueryEngine(datastore)

    app.state.config = config
    app.state.datastore = datastore
    app.state.users = UserService(datastore)
    app.state.cuisines = cuisines
    app.state.query = query
    app.state.recipes = RecipeService(datastore, cuisines, query)
    app.state.reviews = ReviewAggregator(datastore)
    app.state.image_lookup = CachedImageLookup(
        partial(find_image_url, config=image_config), ttl=image_config.cache_ttl
    )
    app.state.llm_config = llm_config

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/register", response_model=RegisterResponse, status_code=201)
    def register(body: RegisterRequest, users: UserService = Depends(_users)) -> RegisterResponse:
        user_id = users.register_user(body.username, body.password, body.confirm_password, body.email)
        return RegisterResponse(user_id=user_id, message="User registered successfully!")

    @app.post("/login", response_model=LoginResponse)
    def login(body: LoginRequest, request: Request, users: UserService = Depends(_users)) -> LoginResponse:
        user = users.authenticate(body.username, body.password)
        token = issue_token(user.id, user.username, request.app.state.config)
        return LoginResponse(message="Login successful!", user_id=user.id, token=token)

    # ── Cuisines ─────────────────────────────────────────────────────────

    @app.get("/getAllCuisines", response_model=CuisineListResponse)
    def all_cuisines(
        identity: Identity = Depends(require_user),
        cuisines: CuisineCatalogue = Depends(_cuisines),
    ) -> CuisineListResponse:
        return CuisineListResponse(data=[CuisineOut.model_validate(c) for c in cuisines.all_cuisines()])

    @app.get("/getCuisineIdByName/{cuisine_name}")
    def cuisine_id_by_name(
        cuisine_name: str,
        identity: Identity = Depends(require_user),
        cuisines: CuisineCatalogue = Depends(_cuisines),
    ) -> dict:
        return {"data": {"cuisineId": cuisines.cuisine_id_by_name(cuisine_name)}}

    @app.get("/getCuisineNameById/{cuisine_id}")
    def cuisine_name_by_id(
        cuisine_id: int,
        identity: Identity = Depends(require_user),
        cuisines: CuisineCatalogue = Depends(_cuisines),
    ) -> dict:
        return {"data": {"cuisineName": cuisines.cuisine_name_by_id(cuisine_id)}}

    # ── Recipes ──────────────────────────────────────────────────────────

    @app.post("/createRecipe", response_model=RecipeCreatedResponse, status_code=201)
    def create_recipe(
        body: RecipeCreateRequest,
        identity: Identity = Depends(require_user),
        recipes: RecipeService = Depends(_recipes),
    ) -> RecipeCreatedResponse:
        recipe = recipes.create_recipe(
            identity.user_id,
            title=body.title,
            description=body.description,
            ingredients=body.ingredients,
            instructions=body.instructions,
            difficulty_level=body.difficulty_level.value,
            cuisine_name=body.cuisine_name,
            calories=body.calories,
            dietary_preferences=body.dietary_preferences.value,
        )
        return RecipeCreatedResponse(message="Recipe created successfully!", recipe=recipe)

    @app.get("/recipesByCriteria", response_model=RecipeListResponse)
    def recipes_by_criteria(
        calorie_limit: float = Query(..., alias="calorieLimitPerMeal"),
        dietary_preferences: str | None = Query(None, alias="dietaryPreferences"),
        preferred_cuisine: str | None = Query(None, alias="preferredCuisine"),
        identity: Identity = Depends(require_user),
        cuisines: CuisineCatalogue = Depends(_cuisines),
        query: RecipeQueryEngine = Depends(_query),
    ) -> RecipeListResponse:
        cuisine_id = None
        if preferred_cuisine and preferred_cuisine.strip():
            try:
                cuisine_id = cuisines.cuisine_id_by_name(preferred_cuisine)
            except NotFoundError:
                raise NotFoundError("Preferred cuisine not found.") from None
        found = query.find_by_criteria(dietary_preferences, calorie_limit, cuisine_id)
        return RecipeListResponse(data=found)

    @app.get("/recipesByUser/{username}", response_model=RecipeListResponse)
    def recipes_by_user(
        username: str,
        identity: Identity = Depends(require_user),
        query: RecipeQueryEngine = Depends(_query),
    ) -> RecipeListResponse:
        return RecipeListResponse(data=query.find_by_user(username))

    @app.get("/recipedetails", response_model=RecipeDetailResponse)
    def recipe_details(
        request: Request,
        recipe_id: int = Query(..., alias="recipeId"),
        identity: Identity = Depends(require_user),
        query: RecipeQueryEngine = Depends(_query),
    ) -> RecipeDetailResponse:
        recipe = query.get_details(recipe_id)
        image_url = request.app.state.image_lookup(recipe.title)
        return RecipeDetailResponse(
            data=recipe.model_copy(update={"image_url": image_url}),
            image_url=image_url,
        )

    @app.get("/searchRecipes", response_model=RecipeListResponse)
    def search_recipes(
        request: Request,
        search_query: str = Query("", alias="searchQuery"),
        cuisine: int = Query(ALL_CUISINES),
        dietary_preference: str = Query(ALL_DIETS, alias="dietaryPreference"),
        identity: Identity = Depends(require_user),
        query: RecipeQueryEngine = Depends(_query),
    ) -> RecipeListResponse:
        image_lookup = request.app.state.image_lookup
        found = query.search(search_query, cuisine_id=cuisine, dietary_preference=dietary_preference)
        return RecipeListResponse(
            data=[r.model_copy(update={"image_url": image_lookup(r.title)}) for r in found]
        )

    # ── Reviews ──────────────────────────────────────────────────────────

    @app.post("/createReview", response_model=ReviewCreatedResponse, status_code=201)
    def create_review(
        body: ReviewCreateRequest,
        identity: Identity = Depends(require_user),
        reviews: ReviewAggregator = Depends(_reviews),
    ) -> ReviewCreatedResponse:
        change = reviews.record_review(body.recipe_id, identity.user_id, body.value, body.content)
        return ReviewCreatedResponse(
            message="Review created successfully",
            review_id=change.review.id,
            average_rating=change.average_rating,
        )

    @app.get("/getReviewsByRecipe/{recipe_id}", response_model=RecipeReviewsResponse)
    def reviews_by_recipe(
        recipe_id: int,
        identity: Identity = Depends(require_user),
        reviews: ReviewAggregator = Depends(_reviews),
    ) -> RecipeReviewsResponse:
        return RecipeReviewsResponse(reviews=reviews.reviews_for_recipe(recipe_id), recipe_id=recipe_id)

    @app.get("/getReviewsByUser/{username}", response_model=UserReviewsResponse)
    def reviews_by_user(
        username: str,
        identity: Identity = Depends(require_user),
        reviews: ReviewAggregator = Depends(_reviews),
    ) -> UserReviewsResponse:
        return UserReviewsResponse(reviews=reviews.reviews_by_user(username))

    @app.post("/deleteReview/{review_id}/{recipe_id}", response_model=ReviewDeletedResponse)
    def delete_review(
        review_id: int,
        recipe_id: int,
        identity: Identity = Depends(require_user),
        reviews: ReviewAggregator = Depends(_reviews),
    ) -> ReviewDeletedResponse:
        change = reviews.remove_review(review_id, identity.user_id, recipe_id=recipe_id)
        return ReviewDeletedResponse(
            message="Review deleted successfully.",
            average_rating=change.average_rating,
        )

    # ── Users & profiles ─────────────────────────────────────────────────

    @app.post("/myProfile", response_model=ProfileResponse)
    def my_profile(
        request: Request,
        body: ProfileRequest | None = None,
        identity: Identity = Depends(require_user),
        users: UserService = Depends(_users),
    ) -> ProfileResponse:
        # Another user's id may be passed to view their profile through the same screen
        user_id = body.id if body is not None and body.id else identity.user_id
        user = users.find_user(user_id)
        state = request.app.state
        return ProfileResponse(data=build_profile(user, state.query, state.reviews, state.image_lookup))

    @app.get("/userProfile/{username}", response_model=ProfileResponse)
    def user_profile(
        username: str,
        request: Request,
        identity: Identity = Depends(require_user),
        users: UserService = Depends(_users),
    ) -> ProfileResponse:
        user = users.find_user_by_username(username)
        state = request.app.state
        return ProfileResponse(data=build_profile(user, state.query, state.reviews, state.image_lookup))

    @app.post("/updateUserBio", response_model=BioUpdateResponse)
    def update_user_bio(
        body: BioUpdateRequest,
        identity: Identity = Depends(require_user),
        users: UserService = Depends(_users),
    ) -> BioUpdateResponse:
        user_id = users.update_bio(identity.user_id, body.new_bio)
        return BioUpdateResponse(message="User bio updated successfully", data={"userId": user_id})

    @app.get("/getUserByUsername/{username}", response_model=UserResponse)
    def user_by_username(
        username: str,
        identity: Identity = Depends(require_user),
        users: UserService = Depends(_users),
    ) -> UserResponse:
        return UserResponse(data=UserOut.model_validate(users.find_user_by_username(username)))

    @app.get("/getUserJoinDate/{username}", response_model=JoinDateResponse)
    def user_join_date(
        username: str,
        identity: Identity = Depends(require_user),
        users: UserService = Depends(_users),
    ) -> JoinDateResponse:
        user = users.find_user_by_username(username)
        return JoinDateResponse(data={"joinDate": format_join_date(user)})

    @app.get("/getUserBio/{username}", response_model=BioResponse)
    def user_bio(
        username: str,
        identity: Identity = Depends(require_user),
        users: UserService = Depends(_users),
    ) -> BioResponse:
        user = users.find_user_by_username(username)
        if user.bio is None:
            raise NotFoundError("Bio not found for the specified user.")
        return BioResponse(data={"bio": user.bio})

    # ── AI text generation ───────────────────────────────────────────────

    @app.post("/generateText", response_model=GenerateTextResponse)
    def generate(
        body: GenerateTextRequest,
        request: Request,
        identity: Identity = Depends(require_user),
    ) -> GenerateTextResponse:
        return GenerateTextResponse(message=generate_text(body.question, request.app.state.llm_config))


app = create_app()
