"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import (
    Depends,
    FastAPI,
    File,
    Form,
    Query,
    Request,
    Response,
    UploadFile,
)
from fastapi.responses import PlainTextResponse

from around.adapters.elasticsearch_indices import ensure_indices
from around.api.auth import require_user
from around.api.models import LoginRequest
from around.app_logging import configure_logging
from around.containers import AppContainer
from around.domain.errors import BlobStoreError, ImageMissingError, IndexStoreError
from around.domain.models import AuthenticatedUser, User
from around.domain.posts import Post
from around.services.posts import parse_coordinate
from around.services.users import validate_signup

POST_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        # Startup fails if the index store is unreachable.
        await ensure_indices(state_container.index_client, state_container.settings)
        logger.info("started-service")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/signup", response_class=PlainTextResponse)
    async def signup(user: User, request: Request) -> PlainTextResponse:
        """Register a new user."""
        logger.info("Received one signup request")
        state_container: AppContainer = request.app.state.container
        if not validate_signup(user):
            logger.info("Empty password or username")
            return PlainTextResponse("Empty password or username", status_code=500)
        if not await state_container.user_service.create_user(user):
            logger.info("Failed to add a new user: username=%s", user.username)
            return PlainTextResponse("Failed to add a new user", status_code=500)
        return PlainTextResponse("User added successfully.")

    @app.post("/login", response_class=PlainTextResponse)
    async def login(credentials: LoginRequest, request: Request) -> PlainTextResponse:
        """Exchange valid credentials for a session token."""
        logger.info("Received one login request")
        state_container: AppContainer = request.app.state.container
        if not await state_container.user_service.verify_credentials(
            credentials.username, credentials.password
        ):
            logger.info("Invalid password or username: %s", credentials.username)
            return PlainTextResponse("Invalid password or username", status_code=403)
        token = state_container.token_service.issue_token(credentials.username)
        return PlainTextResponse(token)

    @app.post("/post")
    async def create_post(  # noqa: PLR0913
        request: Request,
        identity: AuthenticatedUser = Depends(require_user),
        message: str = Form(default=""),
        lat: str = Form(default=""),
        lon: str = Form(default=""),
        image: UploadFile | None = File(default=None),
    ) -> Response:
        """Upload a post image and index the post."""
        logger.info("Received one post request: %s", message)
        state_container: AppContainer = request.app.state.container
        try:
            await state_container.post_service.ingest(
                author=identity.username,
                message=message,
                raw_lat=lat,
                raw_lon=lon,
                image=image.file if image is not None else None,
                content_type=image.content_type if image is not None else None,
            )
        except ImageMissingError:
            logger.info("Image is not available: user=%s", identity.username)
            return _post_error("Image is not available")
        except BlobStoreError:
            logger.exception("Image upload failed: user=%s", identity.username)
            return _post_error("Failed to upload image")
        except IndexStoreError:
            logger.exception("Saving post failed: user=%s", identity.username)
            return _post_error("Failed to save post")
        finally:
            if image is not None:
                await image.close()
        return Response(status_code=200, headers=POST_CORS_HEADERS)

    @app.get("/search", response_model=list[Post])
    async def search(
        request: Request,
        response: Response,
        identity: AuthenticatedUser = Depends(require_user),
        lat: str = "",
        lon: str = "",
        range_km: str | None = Query(default=None, alias="range"),
    ) -> list[Post] | Response:
        """Return posts near the given point."""
        state_container: AppContainer = request.app.state.container
        try:
            posts = await state_container.search_service.search(
                parse_coordinate(lat), parse_coordinate(lon), range_km
            )
        except IndexStoreError:
            logger.exception("Search failed: user=%s", identity.username)
            return PlainTextResponse("Failed to search posts", status_code=500)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return posts

    return app


def _post_error(text: str) -> PlainTextResponse:
    return PlainTextResponse(text, status_code=500, headers=POST_CORS_HEADERS)
