"""Gemini Image Provider - Infrastructure Layer"""

import asyncio
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from ...domain.entity.generation import (
    ErrorKind,
    GenerationError,
    GenerationOutcome,
    GenerationRequest,
)
from ...domain.entity.image import GeneratedImage
from ...domain.repository.image_provider import ImageProvider
from .error_mapping import classify_exception

logger = logging.getLogger(__name__)

SAFETY_FINISH_REASONS = {
    "SAFETY",
    "PROHIBITED_CONTENT",
    "BLOCKLIST",
    "SPII",
    "IMAGE_SAFETY",
    "IMAGE_PROHIBITED_CONTENT",
}
REFUSAL_FINISH_REASONS = {"OTHER", "IMAGE_OTHER"}


def _reason_name(reason: Any) -> Optional[str]:
    if reason is None:
        return None
    return getattr(reason, "name", str(reason))


def interpret_response(response: Any) -> GenerationOutcome:
    """Turn a generate_content response into a GenerationOutcome

    Args:
        response: SDK response (or any object with the same shape)

    Returns:
        Classified outcome
    """
    # 1. Nothing came back at all
    if response is None:
        return GenerationOutcome.failure(ErrorKind.SERVER_ERROR, "No response from the model")

    candidates = getattr(response, "candidates", None)
    if not candidates:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = _reason_name(getattr(feedback, "block_reason", None))
        if block_reason:
            return GenerationOutcome.failure(
                ErrorKind.SAFETY_BLOCKED, f"Prompt blocked: {block_reason}"
            )
        return GenerationOutcome.failure(
            ErrorKind.SERVER_ERROR,
            "No candidates returned from the model. The service might be temporarily unavailable.",
        )

    candidate = candidates[0]
    finish_reason = _reason_name(getattr(candidate, "finish_reason", None))

    # 2. Explicit safety block
    if finish_reason in SAFETY_FINISH_REASONS:
        return GenerationOutcome.failure(
            ErrorKind.SAFETY_BLOCKED,
            "Generation was blocked due to safety settings.",
        )

    content = getattr(candidate, "content", None)
    parts = [p for p in (getattr(content, "parts", None) or []) if not getattr(p, "thought", False)]

    # 3. First image part wins
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return GenerationOutcome.success(
                GeneratedImage(data=inline_data.data, mime_type=inline_data.mime_type or "image/png")
            )

    # 4. Text without an image is a refusal
    texts = [p.text for p in parts if getattr(p, "text", None)]
    if texts:
        return GenerationOutcome.failure(ErrorKind.REFUSAL, "\n".join(texts))

    if finish_reason in REFUSAL_FINISH_REASONS:
        return GenerationOutcome.failure(
            ErrorKind.REFUSAL,
            "The model refused to process this request. Modify the prompt or images.",
        )

    return GenerationOutcome.failure(
        ErrorKind.UNKNOWN,
        f"No image data found in the response. Finish reason: {finish_reason or 'Unknown'}",
    )


class GeminiImageProvider(ImageProvider):
    """Gemini image-editing provider"""

    SUPPORTED_MODELS = [
        "gemini-3-pro-image-preview",
        "gemini-2.5-flash-image",
        "gemini-2.5-flash-image-preview",
    ]

    def __init__(
        self,
        client: genai.Client,
        model: str = "gemini-3-pro-image-preview",
        timeout: Optional[float] = None,
    ):
        """Initialize the provider

        Args:
            client: Configured google-genai client
            model: Image model name
            timeout: Per-call timeout in seconds (optional)
        """
        self._client = client
        self._model = model
        self._timeout = timeout

    @classmethod
    def from_api_key(
        cls,
        api_key: str,
        model: str = "gemini-3-pro-image-preview",
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> "GeminiImageProvider":
        http_options = types.HttpOptions(
            base_url=base_url or None,
            timeout=int(timeout * 1000) if timeout else None,
        )
        client = genai.Client(api_key=api_key, http_options=http_options)
        return cls(client=client, model=model, timeout=timeout)

    async def generate_image(self, request: GenerationRequest) -> GenerationOutcome:
        contents = self._build_contents(request)
        config = self._build_config(request)

        logger.info(
            f"Calling {self._model}: request_id={request.id}, images={len(request.images)}, "
            f"aspect_ratio={request.aspect_ratio.value if request.aspect_ratio else 'source'}"
        )
        try:
            response = await self._call(contents, config)
        except GenerationError as e:
            logger.warning(
                f"Gemini call failed: request_id={request.id}, kind={e.kind.value}, error={e.detail}"
            )
            return GenerationOutcome.failure(e.kind, e.detail)

        outcome = interpret_response(response)
        if outcome.is_success:
            logger.info(f"Generated image: request_id={request.id}, bytes={outcome.image.size}")
        else:
            logger.warning(
                f"Generation failed: request_id={request.id}, kind={outcome.error_kind.value}"
            )
        return outcome

    def supports_model(self, model: str) -> bool:
        """Check whether the model is supported"""
        return model in self.SUPPORTED_MODELS

    async def _call(self, contents: list, config: types.GenerateContentConfig) -> Any:
        """Issue one generate_content call

        Raises:
            GenerationError: The call failed before a response was obtained
        """
        try:
            call = self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
            if self._timeout:
                return await asyncio.wait_for(call, timeout=self._timeout)
            return await call
        except asyncio.CancelledError:
            raise
        except Exception as e:
            kind = classify_exception(e)
            if kind is ErrorKind.UNKNOWN:
                logger.exception("Unexpected Gemini error")
            raise GenerationError(kind, str(e) or kind.value) from e

    def _build_contents(self, request: GenerationRequest) -> list:
        parts = [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type)
            for image in request.images
        ]
        parts.append(types.Part.from_text(text=request.prompt))
        return [types.Content(role="user", parts=parts)]

    def _build_config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        if request.aspect_ratio is None:
            return types.GenerateContentConfig()
        return types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=request.aspect_ratio.value),
        )
