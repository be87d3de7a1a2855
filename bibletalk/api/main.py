"""FastAPI gateway between the client and the OpenAI API."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bibletalk.api.models import (
    DiscussionRequest,
    DiscussionResponse,
    FlyerRequest,
    FlyerResponse,
    ModerationRequest,
    ModerationResponse,
)
from bibletalk.generators.discussion import DiscussionGenerator
from bibletalk.generators.flyer import FlyerGenerator
from bibletalk.generators.moderation import ModerationChecker

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Global instances (initialized on startup)
moderation_checker: ModerationChecker | None = None
discussion_generator: DiscussionGenerator | None = None
flyer_generator: FlyerGenerator | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and cleanup resources."""
    global moderation_checker, discussion_generator, flyer_generator

    logger.info("Initializing gateway resources...")
    moderation_checker = ModerationChecker()
    discussion_generator = DiscussionGenerator()
    flyer_generator = FlyerGenerator()

    yield

    logger.info("Cleaning up gateway resources...")


app = FastAPI(
    title="BibleTalk GPT Gateway",
    description="Moderation, discussion outline and flyer generation over the OpenAI API",
    version="0.1.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    """Answer pre-flight requests and stamp fixed CORS headers on every response."""
    if request.method == "OPTIONS":
        return Response(headers=CORS_HEADERS)

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(RequestValidationError)
async def fallback_on_invalid_body(request: Request, exc: RequestValidationError) -> Response:
    """Answer a malformed body with the route's failure envelope instead of a 422."""
    path = request.url.path
    logger.warning(f"Invalid request body for {path}: {exc.errors()}")

    if path == "/api/moderation":
        return JSONResponse({"flagged": False})
    if path == "/api/generate/discussion":
        return JSONResponse({"discussion": ""})
    if path == "/api/generate/flyer":
        return Response(content=b"")
    return await request_validation_exception_handler(request, exc)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.post(
    "/api/moderation",
    response_model=ModerationResponse,
    response_model_exclude_none=True,
)
async def moderate_hint(body: ModerationRequest) -> ModerationResponse:
    """Screen a hint with the moderation endpoint.

    Fails open: any error is reported as not flagged.

    Args:
        body: Moderation request with the hint.

    Returns:
        Flag and category map, or only ``flagged=False`` on failure.
    """
    if not body.hint:
        return ModerationResponse(flagged=False)

    if moderation_checker is None:
        logger.error("Moderation checker not initialized")
        return ModerationResponse(flagged=False)

    try:
        result = await moderation_checker.acheck(body.hint)
    except Exception:
        logger.exception("Moderation failed, treating hint as not flagged")
        return ModerationResponse(flagged=False)

    return ModerationResponse(flagged=result.flagged, categories=result.categories)


@app.post("/api/generate/flyer", response_model=FlyerResponse)
async def generate_flyer(body: FlyerRequest):
    """Generate a flyer image for a discussion topic.

    Args:
        body: Flyer request with the topic and optional extra prompt.

    Returns:
        Base64 image, or an empty body on failure.
    """
    if not body.topic:
        return Response(content=b"")

    if flyer_generator is None:
        logger.error("Flyer generator not initialized")
        return Response(content=b"")

    try:
        image = await flyer_generator.agenerate(body.topic, body.extra_prompt)
    except Exception:
        logger.exception("Error generating flyer")
        return Response(content=b"")

    return FlyerResponse(image=image)


@app.post("/api/generate/discussion", response_model=DiscussionResponse)
async def generate_discussion(body: DiscussionRequest) -> DiscussionResponse:
    """Generate a discussion outline from a hint.

    Args:
        body: Discussion request with the hint and optional model override.

    Returns:
        The outline, or ``discussion=""`` on failure.
    """
    if not body.hint:
        return DiscussionResponse(discussion="")

    if discussion_generator is None:
        logger.error("Discussion generator not initialized")
        return DiscussionResponse(discussion="")

    try:
        outline = await discussion_generator.agenerate(body.hint, model=body.model)
    except Exception:
        logger.exception("Error generating discussion")
        return DiscussionResponse(discussion="")

    return DiscussionResponse(discussion=outline)
