"""Generate Image Use Case - Application Layer"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ...domain.entity.generation import (
    ErrorKind,
    GenerationMode,
    GenerationOutcome,
    GenerationRequest,
)
from ...domain.entity.history import HistoryEntry
from ...domain.entity.image import AspectRatio, ImageBlob, SourceImage
from ...domain.entity.style import StyleParameters
from ...domain.repository.image_normalizer import (
    ImageFormatError,
    ImageNormalizer,
    NormalizationProfile,
)
from ...domain.repository.image_provider import ImageProvider
from ...domain.service.aspect_ratio import select_aspect_ratio
from ...domain.service.prompt_builder import compose_face_swap_prompt, compose_portrait_prompt
from .manage_history import HistoryFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Attempt:
    """Inputs of the last single-item call, kept for retry"""

    sources: Tuple[ImageBlob, ...]
    prompt: str
    aspect_ratio: AspectRatio
    style: Optional[StyleParameters]
    mode: GenerationMode


class GenerateImageUseCase:
    """Single-item generation

    Covers portrait transformation, dual-image face swap, refinement of a
    previous result and retry of the last attempt. Failures are returned as
    outcomes for the caller to display.
    """

    def __init__(
        self,
        provider: ImageProvider,
        normalizer: ImageNormalizer,
        history: Optional[HistoryFeed] = None,
        single_profile: NormalizationProfile = NormalizationProfile(),
        dual_profile: NormalizationProfile = NormalizationProfile(max_edge=1280, quality=90),
    ):
        """Initialize the use case

        Args:
            provider: Remote image provider
            normalizer: Image normalizer
            history: Feed receiving successful results (optional)
            single_profile: Normalization bounds for one-image requests
            dual_profile: Normalization bounds for each image of a face swap
        """
        self._provider = provider
        self._normalizer = normalizer
        self._history = history
        self._single_profile = single_profile
        self._dual_profile = dual_profile
        self._last_attempt: Optional[_Attempt] = None
        self._last_outcome: Optional[GenerationOutcome] = None
        self._last_recorded = False
        self._loading = False

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def last_outcome(self) -> Optional[GenerationOutcome]:
        return self._last_outcome

    @property
    def can_retry(self) -> bool:
        """A retry needs a previous attempt that failed for a retryable reason"""
        return (
            self._last_attempt is not None
            and self._last_outcome is not None
            and self._last_outcome.retryable
        )

    async def execute(
        self,
        source: SourceImage,
        prompt: Optional[str] = None,
        aspect_ratio: AspectRatio = AspectRatio.AUTO,
        style: Optional[StyleParameters] = None,
    ) -> GenerationOutcome:
        """Transform one image

        Args:
            source: Image to transform
            prompt: Instruction; composed from ``style`` when omitted or empty
            aspect_ratio: Requested framing, AUTO resolves from the image
            style: Style parameters recorded with the result

        Returns:
            Generation outcome
        """
        if not prompt:
            prompt = compose_portrait_prompt(style or StyleParameters())
        attempt = _Attempt(
            sources=(source,),
            prompt=prompt,
            aspect_ratio=aspect_ratio,
            style=style,
            mode=GenerationMode.SINGLE,
        )
        return await self._run(attempt, record=True)

    async def execute_face_swap(
        self,
        target: SourceImage,
        face: SourceImage,
        style: Optional[StyleParameters] = None,
    ) -> GenerationOutcome:
        """Put the face from ``face`` onto the person in ``target``

        The target's framing is preserved, so no aspect ratio is sent.
        """
        style = style or StyleParameters()
        attempt = _Attempt(
            sources=(target, face),
            prompt=compose_face_swap_prompt(style.custom_prompt, style.quality),
            aspect_ratio=AspectRatio.AUTO,
            style=style,
            mode=GenerationMode.FACE_SWAP,
        )
        return await self._run(attempt, record=True)

    async def refine(
        self,
        image: ImageBlob,
        instruction: str,
        aspect_ratio: AspectRatio = AspectRatio.AUTO,
    ) -> GenerationOutcome:
        """Edit a previous result with a follow-up instruction

        Refinements are conversational and are not recorded in history.
        """
        attempt = _Attempt(
            sources=(image,),
            prompt=instruction,
            aspect_ratio=aspect_ratio,
            style=None,
            mode=GenerationMode.SINGLE,
        )
        return await self._run(attempt, record=False)

    async def retry(self) -> GenerationOutcome:
        """Re-issue the last attempt with a freshly built request

        Raises:
            RuntimeError: Nothing to retry, or the last failure is final
        """
        if not self.can_retry:
            raise RuntimeError("The last generation cannot be retried")
        attempt = self._last_attempt
        return await self._run(attempt, record=self._last_recorded)

    async def _run(self, attempt: _Attempt, record: bool) -> GenerationOutcome:
        if self._loading:
            raise RuntimeError("A generation is already in progress")

        self._loading = True
        self._last_attempt = attempt
        self._last_recorded = record
        self._last_outcome = None
        try:
            outcome, resolved_ratio = await self._generate(attempt)
        finally:
            self._loading = False

        self._last_outcome = outcome
        if outcome.is_success and record and self._history is not None:
            await self._history.record(
                HistoryEntry(
                    image=outcome.image,
                    prompt=attempt.prompt,
                    aspect_ratio=resolved_ratio,
                    mode=attempt.mode,
                    style=attempt.style,
                )
            )
        return outcome

    async def _generate(self, attempt: _Attempt):
        # 1. Normalize inputs
        dual = len(attempt.sources) == 2
        profile = self._dual_profile if dual else self._single_profile
        try:
            images = tuple(
                self._normalizer.normalize(source, profile.max_edge, profile.quality)
                for source in attempt.sources
            )
        except ImageFormatError as e:
            logger.warning(f"Rejected input image: {e}")
            return GenerationOutcome.failure(ErrorKind.FORMAT_ERROR, str(e)), None

        # 2. Resolve framing from the first image
        first = images[0]
        resolved = select_aspect_ratio(
            attempt.aspect_ratio, first.original_width, first.original_height
        )

        # 3. Build a fresh request and call the provider once
        request = GenerationRequest(
            images=images,
            prompt=attempt.prompt,
            aspect_ratio=None if dual else resolved,
        )
        logger.info(
            f"Generating {attempt.mode.value}: request_id={request.id}, aspect_ratio={resolved.value}"
        )
        return await self._provider.generate_image(request), resolved
