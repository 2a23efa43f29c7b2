"""OpenRouter chat relay service."""
import asyncio
import logging
from typing import List, Dict, Any, Optional, Sequence
import httpx
from nihongo_kaiwa.prompts.registry import PromptRegistry, prompt_registry
from nihongo_kaiwa.services.openrouter.catalog import DEFAULT_MODEL
from nihongo_kaiwa.services.openrouter.conversation import prepare_conversation
from nihongo_kaiwa.services.openrouter.errors import LocalError, classify_error
from nihongo_kaiwa.services.openrouter.models import (
    ChatReply,
    ConversationMessage,
    Credentials,
    GenerationOptions,
    ModelDescriptor,
)

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT = 60.0  # seconds


class OpenRouterService:
    """Relays conversations to OpenRouter, injecting the persona on the first turn."""

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        persona: Optional[ConversationMessage] = None,
        base_url: str = OPENROUTER_BASE_URL,
        auth_path: str = "/auth/key",
        app_url: str = "http://localhost:3000",
        app_title: str = "AI Nihongo Kaiwa",
        default_model: str = DEFAULT_MODEL.value,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the relay service.

        Args:
            credentials: Bearer token holder; an empty key is allowed but every call will be rejected upstream
            persona: System message injected on the first turn (defaults to the v1 persona template)
            base_url: OpenRouter API base URL
            auth_path: Path probed by connect()
            app_url: Sent as HTTP-Referer
            app_title: Sent as X-Title
            default_model: Model used when a call does not name one
            timeout: Request timeout in seconds
            http_client: Optional preconfigured client (tests inject a mock transport here)
        """
        self._credentials = credentials or Credentials()
        self.persona = persona or ConversationMessage(
            role="system", content=prompt_registry.get_persona_prompt()
        )
        self.base_url = base_url.rstrip('/')
        self.auth_path = auth_path
        self.app_url = app_url
        self.app_title = app_title
        self.default_model = default_model
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

        if not self._credentials.is_set:
            logger.warning("OpenRouter API key not found. Please set OPENROUTER_API_KEY environment variable.")

    @classmethod
    def from_settings(
        cls,
        settings,
        registry: Optional[PromptRegistry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "OpenRouterService":
        """Build a service from application settings."""
        registry = registry or prompt_registry
        persona = ConversationMessage(
            role="system",
            content=registry.get_persona_prompt(
                version=settings.PERSONA_VERSION,
                persona_name=settings.PERSONA_NAME,
                learner_language=settings.LEARNER_LANGUAGE,
            ),
        )
        return cls(
            credentials=Credentials(settings.OPENROUTER_API_KEY),
            persona=persona,
            base_url=settings.OPENROUTER_BASE_URL,
            auth_path=settings.OPENROUTER_AUTH_PATH,
            app_url=settings.OPENROUTER_APP_URL,
            app_title=settings.OPENROUTER_APP_TITLE,
            default_model=settings.OPENROUTER_DEFAULT_MODEL,
            timeout=settings.OPENROUTER_TIMEOUT,
            http_client=http_client,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers from the credentials current at dispatch time."""
        return {
            "Content-Type": "application/json",
            "Authorization": self._credentials.authorization(),
            "HTTP-Referer": self.app_url,
            "X-Title": self.app_title,
        }

    async def _get(self, path: str) -> httpx.Response:
        response = await asyncio.wait_for(
            self._client.get(
                f"{self.base_url}{path}",
                headers=self._get_headers(),
                timeout=self.timeout,
            ),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    async def connect(self) -> bool:
        """Probe OpenRouter with an authenticated call.

        Returns:
            True when the probe answers with any 2xx status. Faults are
            classified and logged, never raised.
        """
        logger.info("Connecting to OpenRouter API...")
        try:
            await self._get(self.auth_path)
        except Exception as e:
            error = classify_error(e)
            logger.error(f"Failed to connect to OpenRouter API: {error.message}")
            return False

        logger.info("Successfully connected to OpenRouter API")
        return True

    async def send_chat(
        self,
        messages: Sequence[ConversationMessage],
        model: Optional[str] = None,
        options: Optional[GenerationOptions] = None,
    ) -> Dict[str, Any]:
        """Send a chat completion request and return the decoded payload.

        Args:
            messages: Messages to dispatch as-is (no persona handling here)
            model: Model identifier; defaults to the configured default model
            options: Generation options; defaults apply when omitted

        Returns:
            Raw decoded response payload

        Raises:
            UpstreamHTTPError: Non-2xx response
            NoResponseError: Timeout or transport failure
            LocalError: Undecodable payload or other local fault
        """
        model = model or self.default_model
        options = options or GenerationOptions()

        logger.info(f"Sending request to model: {model}")
        logger.info(f"Messages: {len(messages)} items")

        try:
            payload = {
                "model": model,
                "messages": [message.to_dict() for message in messages],
                "temperature": options.temperature,
                "max_tokens": options.max_tokens,
                "stream": options.stream,
            }
            # httpx timeouts apply per phase; wait_for caps the whole exchange
            response = await asyncio.wait_for(
                self._client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._get_headers(),
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            error = classify_error(e, context="OpenRouter API Error")
            logger.error(f"Error sending chat to OpenRouter: {error.message}")
            raise error from e

        logger.info("OpenRouter response received successfully")
        return data

    def process_response(self, response: Dict[str, Any]) -> ChatReply:
        """Extract the assistant reply from a completion payload.

        Raises:
            LocalError: No choices, or a choice without text content
        """
        choices = response.get("choices") if isinstance(response, dict) else None
        if not isinstance(choices, list) or not choices:
            logger.error("No response choices received from OpenRouter")
            raise LocalError("No response choices received from OpenRouter", details=response)

        first_choice = choices[0]
        message = first_choice.get("message") if isinstance(first_choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            logger.error(f"Malformed choice in OpenRouter response: {str(first_choice)[:500]}")
            raise LocalError("Malformed choice in OpenRouter response: missing message content", details=response)

        logger.debug("Response processed successfully")
        return ChatReply(text=content.strip(), usage=response.get("usage"))

    async def chat(
        self,
        messages: Sequence[ConversationMessage],
        model: Optional[str] = None,
        options: Optional[GenerationOptions] = None,
        first_turn: Optional[bool] = None,
    ) -> ChatReply:
        """Run one conversation turn: prepare, dispatch, extract.

        Args:
            messages: Full conversation so far, oldest first
            model: Model identifier; defaults to the configured default model
            options: Generation options
            first_turn: Explicit conversation state; None infers it from the list shape

        Returns:
            ChatReply with trimmed text and upstream usage
        """
        prepared = prepare_conversation(messages, self.persona, first_turn=first_turn)
        if len(prepared) != len(messages):
            logger.debug("Persona system message injected")

        response = await self.send_chat(prepared, model=model, options=options)
        return self.process_response(response)

    async def get_models(self) -> List[ModelDescriptor]:
        """Fetch the models OpenRouter exposes.

        Raises:
            OpenRouterError: Classified fault, message prefixed with "Failed to fetch available models"
        """
        try:
            response = await self._get("/models")
            entries = response.json().get("data") or []
            if not isinstance(entries, list):
                raise LocalError(
                    f"Malformed models response: expected a list, got {type(entries).__name__}",
                    details=entries,
                )
        except Exception as e:
            error = classify_error(e, context="Failed to fetch available models")
            logger.error(f"Error fetching models: {error.message}")
            raise error from e

        models = []
        for entry in entries:
            model_id = entry.get("id") if isinstance(entry, dict) else None
            if not model_id:
                logger.warning(f"Skipping model entry without id: {str(entry)[:300]}")
                continue
            models.append(ModelDescriptor(id=model_id, name=entry.get("name") or model_id))

        logger.info(f"Found {len(models)} available models")
        return models

    def set_api_key(self, api_key: str) -> None:
        """Replace the bearer token used by subsequent calls."""
        self._credentials = Credentials(api_key)
        logger.info("OpenRouter API key updated")

    def get_api_key_status(self) -> bool:
        """Report whether an API key is configured (never the key itself)."""
        return self._credentials.is_set

    async def close(self):
        """Close HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
