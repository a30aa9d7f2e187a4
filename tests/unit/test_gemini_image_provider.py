import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google.genai import errors as genai_errors
from google.genai import types

from cinestudio.domain.entity.generation import ErrorKind, GenerationError, GenerationRequest
from cinestudio.domain.entity.image import AspectRatio, NormalizedImage
from cinestudio.infrastructure.image.gemini_image_provider import (
    GeminiImageProvider,
    interpret_response,
)


def normalized(data=b"jpeg-bytes"):
    return NormalizedImage(
        data=data,
        mime_type="image/jpeg",
        width=300,
        height=400,
        original_width=1200,
        original_height=1600,
    )


def make_response(parts, finish_reason=types.FinishReason.STOP):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=parts),
                finish_reason=finish_reason,
            )
        ]
    )


def make_provider(response=None, side_effect=None, timeout=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=side_effect)
    return GeminiImageProvider(client=client, model="gemini-3-pro-image-preview", timeout=timeout), client


# --- Response interpretation ---

def test_image_part_is_success():
    response = make_response([types.Part.from_bytes(data=b"png-bytes", mime_type="image/png")])

    outcome = interpret_response(response)

    assert outcome.is_success
    assert outcome.image.data == b"png-bytes"
    assert outcome.image.mime_type == "image/png"


def test_first_image_part_wins_over_text_and_later_images():
    response = make_response([
        types.Part.from_text(text="Here is your portrait"),
        types.Part.from_bytes(data=b"first", mime_type="image/png"),
        types.Part.from_bytes(data=b"second", mime_type="image/jpeg"),
    ])

    outcome = interpret_response(response)

    assert outcome.image.data == b"first"


def test_text_only_is_refusal():
    response = make_response([types.Part.from_text(text="I can't edit photos of real people.")])

    outcome = interpret_response(response)

    assert outcome.error_kind is ErrorKind.REFUSAL
    assert "real people" in outcome.detail


def test_safety_finish_reason_is_safety_blocked():
    response = make_response([], finish_reason=types.FinishReason.SAFETY)

    outcome = interpret_response(response)

    assert outcome.error_kind is ErrorKind.SAFETY_BLOCKED
    assert not outcome.retryable


def test_blocked_prompt_without_candidates_is_safety_blocked():
    response = types.GenerateContentResponse(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.SAFETY
        )
    )

    assert interpret_response(response).error_kind is ErrorKind.SAFETY_BLOCKED


def test_missing_candidates_is_server_error():
    assert interpret_response(types.GenerateContentResponse()).error_kind is ErrorKind.SERVER_ERROR
    assert interpret_response(None).error_kind is ErrorKind.SERVER_ERROR


def test_empty_parts_is_unknown():
    response = make_response([])

    assert interpret_response(response).error_kind is ErrorKind.UNKNOWN


def test_other_finish_reason_without_content_is_refusal():
    response = make_response([], finish_reason=types.FinishReason.OTHER)

    assert interpret_response(response).error_kind is ErrorKind.REFUSAL


# --- Provider calls ---

@pytest.mark.asyncio
async def test_generate_sends_image_prompt_and_ratio():
    # Setup
    response = make_response([types.Part.from_bytes(data=b"out", mime_type="image/png")])
    provider, client = make_provider(response=response)
    request = GenerationRequest(images=(normalized(),), prompt="portrait", aspect_ratio=AspectRatio.PORTRAIT)

    # Execute
    outcome = await provider.generate_image(request)

    # Verify
    assert outcome.is_success
    client.aio.models.generate_content.assert_awaited_once()
    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-3-pro-image-preview"
    parts = kwargs["contents"][0].parts
    assert parts[0].inline_data.data == b"jpeg-bytes"
    assert parts[0].inline_data.mime_type == "image/jpeg"
    assert parts[1].text == "portrait"
    assert kwargs["config"].image_config.aspect_ratio == "3:4"


@pytest.mark.asyncio
async def test_dual_request_sends_both_images_without_ratio():
    response = make_response([types.Part.from_bytes(data=b"out", mime_type="image/png")])
    provider, client = make_provider(response=response)
    request = GenerationRequest(images=(normalized(b"target"), normalized(b"face")), prompt="swap")

    await provider.generate_image(request)

    kwargs = client.aio.models.generate_content.call_args.kwargs
    parts = kwargs["contents"][0].parts
    assert [p.inline_data.data for p in parts[:2]] == [b"target", b"face"]
    assert parts[2].text == "swap"
    assert kwargs["config"].image_config is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,expected",
    [
        (
            genai_errors.ClientError(
                429, {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}
            ),
            ErrorKind.RATE_LIMITED,
        ),
        (
            genai_errors.ServerError(
                503, {"error": {"code": 503, "message": "The model is overloaded", "status": "UNAVAILABLE"}}
            ),
            ErrorKind.SERVER_ERROR,
        ),
        (httpx.ConnectError("Connection refused"), ErrorKind.NETWORK_ERROR),
        (RuntimeError("something odd happened"), ErrorKind.UNKNOWN),
        (RuntimeError("XHR error code 6"), ErrorKind.NETWORK_ERROR),
    ],
)
async def test_transport_errors_are_classified(error, expected):
    provider, client = make_provider(side_effect=error)
    request = GenerationRequest(images=(normalized(),), prompt="portrait", aspect_ratio=AspectRatio.SQUARE)

    outcome = await provider.generate_image(request)

    assert outcome.error_kind is expected
    assert outcome.detail
    client.aio.models.generate_content.assert_awaited_once()


@pytest.mark.asyncio
async def test_timeout_is_network_error():
    async def slow(**kwargs):
        await asyncio.sleep(1)

    provider, _ = make_provider(side_effect=slow, timeout=0.01)
    request = GenerationRequest(images=(normalized(),), prompt="portrait", aspect_ratio=AspectRatio.SQUARE)

    outcome = await provider.generate_image(request)

    assert outcome.error_kind is ErrorKind.NETWORK_ERROR


def test_supports_model():
    provider, _ = make_provider()

    assert provider.supports_model("gemini-3-pro-image-preview")
    assert not provider.supports_model("dall-e-3")


@pytest.mark.asyncio
async def test_call_raises_structured_error():
    provider, _ = make_provider(side_effect=httpx.ReadTimeout("read timed out"))

    with pytest.raises(GenerationError) as excinfo:
        await provider._call([], types.GenerateContentConfig())

    assert excinfo.value.kind is ErrorKind.NETWORK_ERROR
    assert "timed out" in excinfo.value.detail
