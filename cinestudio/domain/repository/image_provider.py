"""Image Provider Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod

from ..entity.generation import GenerationOutcome, GenerationRequest


class ImageProvider(ABC):
    """Remote image generation service interface"""

    @abstractmethod
    async def generate_image(self, request: GenerationRequest) -> GenerationOutcome:
        """Transform the request images with its prompt

        Issues exactly one remote call. Every failure, including transport
        exceptions, is classified into the returned outcome.

        Args:
            request: Generation request

        Returns:
            Success with the generated image, or a classified failure
        """
        pass

    @abstractmethod
    def supports_model(self, model: str) -> bool:
        """Check whether the provider can serve the given model"""
        pass
