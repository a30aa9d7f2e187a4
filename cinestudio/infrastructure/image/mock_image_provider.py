import io
from typing import Callable, List, Optional

from PIL import Image

from ...domain.entity.generation import ErrorKind, GenerationOutcome, GenerationRequest
from ...domain.entity.image import GeneratedImage
from ...domain.repository.image_provider import ImageProvider

FailurePolicy = Callable[[int, GenerationRequest], Optional[GenerationOutcome]]


class MockImageProvider(ImageProvider):
    """Offline image provider, used for tests and when no API key is set

    Returns a flat PNG sized like the first request image. ``failure_policy``
    receives the 1-based call number and may return a failure outcome.
    """

    def __init__(self, failure_policy: Optional[FailurePolicy] = None, color=(32, 32, 48)):
        self._failure_policy = failure_policy
        self._color = color
        self.requests: List[GenerationRequest] = []

    @classmethod
    def failing_on(cls, *call_numbers: int, kind: ErrorKind = ErrorKind.SERVER_ERROR):
        """Provider failing only on the given call numbers"""
        failing = set(call_numbers)

        def policy(call_number, request):
            if call_number in failing:
                return GenerationOutcome.failure(kind, f"Mock failure on call {call_number}")
            return None

        return cls(failure_policy=policy)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def generate_image(self, request: GenerationRequest) -> GenerationOutcome:
        """Generate a placeholder image"""
        self.requests.append(request)
        if self._failure_policy:
            failure = self._failure_policy(self.call_count, request)
            if failure is not None:
                return failure

        first = request.images[0]
        picture = Image.new("RGB", (first.width, first.height), self._color)
        buffer = io.BytesIO()
        picture.save(buffer, format="PNG")
        return GenerationOutcome.success(GeneratedImage(data=buffer.getvalue(), mime_type="image/png"))

    def supports_model(self, model: str) -> bool:
        return True
