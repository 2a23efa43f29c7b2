"""OpenRouter relay API endpoints."""
import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from nihongo_kaiwa.api.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    FreeModelsResponse,
    ModelInfo,
    ModelsResponse,
    SetKeyRequest,
    SetKeyResponse,
    StatusResponse,
)
from nihongo_kaiwa.services.openrouter import (
    ConversationMessage,
    GenerationOptions,
    OpenRouterError,
    OpenRouterService,
    UpstreamHTTPError,
    NoResponseError,
    DEFAULT_MODEL,
    list_free_models,
)
from nihongo_kaiwa.services.openrouter.catalog import find_free_model
from nihongo_kaiwa.services.openrouter.models import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/openrouter", tags=["openrouter"])


def get_openrouter_service(request: Request) -> OpenRouterService:
    """Return the relay service owned by the application."""
    return request.app.state.openrouter_service


def error_status(error: OpenRouterError) -> int:
    """Map a relay error kind to the HTTP status returned to the front end."""
    if isinstance(error, UpstreamHTTPError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(error, NoResponseError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(error: OpenRouterError) -> JSONResponse:
    return JSONResponse(
        status_code=error_status(error),
        content=ErrorResponse(**error.to_dict()).model_dump(),
    )


@router.post("/chat", response_model=ChatResponse, responses={502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}})
async def chat(req: ChatRequest, service: OpenRouterService = Depends(get_openrouter_service)):
    """Relay one conversation turn to OpenRouter."""
    model = req.model or service.default_model
    options = GenerationOptions(
        temperature=req.temperature if req.temperature is not None else DEFAULT_TEMPERATURE,
        max_tokens=req.max_tokens or DEFAULT_MAX_TOKENS,
    )
    logger.info(
        f"Received chat request: model={model} (free={find_free_model(model) is not None}), "
        f"messages={len(req.messages)}, temperature={options.temperature}, max_tokens={options.max_tokens}"
    )

    messages = [ConversationMessage(role=m.role, content=m.content) for m in req.messages]
    try:
        reply = await service.chat(messages, model=model, options=options, first_turn=req.first_turn)
    except OpenRouterError as e:
        logger.error(f"Chat API error ({e.kind}): {e.message}")
        return error_response(e)

    logger.info("Chat response sent successfully")
    return ChatResponse(text=reply.text, usage=reply.usage)


@router.get("/status", response_model=StatusResponse)
async def openrouter_status(service: OpenRouterService = Depends(get_openrouter_service)):
    """Probe OpenRouter reachability and report whether a key is configured."""
    connected = await service.connect()
    return StatusResponse(connected=connected, api_key_set=service.get_api_key_status())


@router.get("/models", response_model=ModelsResponse, responses={502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}})
async def list_models(service: OpenRouterService = Depends(get_openrouter_service)):
    """List models available on OpenRouter."""
    try:
        models = await service.get_models()
    except OpenRouterError as e:
        return error_response(e)
    return ModelsResponse(models=[ModelInfo(id=m.id, name=m.name) for m in models])


@router.get("/free-models", response_model=FreeModelsResponse)
async def list_free_model_ids():
    """List the built-in catalog of free models."""
    return FreeModelsResponse(models=list_free_models(), default=DEFAULT_MODEL.value)


@router.post("/set-key", response_model=SetKeyResponse, responses={400: {"model": ErrorResponse}})
async def set_key(req: SetKeyRequest, service: OpenRouterService = Depends(get_openrouter_service)):
    """Replace the OpenRouter API key used by subsequent calls (development helper)."""
    api_key = (req.api_key or "").strip()
    if not api_key:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="API key is required").model_dump(),
        )

    service.set_api_key(api_key)
    return SetKeyResponse(message="API key set successfully")
