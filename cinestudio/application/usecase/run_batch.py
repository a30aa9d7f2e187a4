"""Run Batch Use Case - Application Layer"""

import logging
from typing import Callable, List, Optional

from ...domain.entity.batch import (
    BatchItem,
    BatchProgress,
    BatchPrompt,
    BatchResult,
    BatchStatus,
    InvalidTransitionError,
)
from ...domain.entity.generation import (
    ErrorKind,
    GenerationMode,
    GenerationOutcome,
    GenerationRequest,
)
from ...domain.entity.history import HistoryEntry
from ...domain.entity.image import AspectRatio
from ...domain.entity.style import StyleParameters
from ...domain.repository.image_normalizer import (
    ImageFormatError,
    ImageNormalizer,
    NormalizationProfile,
)
from ...domain.repository.image_provider import ImageProvider
from ...domain.service.aspect_ratio import select_aspect_ratio
from ...domain.service.prompt_builder import compose_portrait_prompt
from .manage_history import HistoryFeed

logger = logging.getLogger(__name__)

PromptFactory = Callable[[BatchItem], BatchPrompt]
ProgressCallback = Callable[[BatchProgress], None]


class BatchAlreadyRunningError(RuntimeError):
    """A batch run was started while another one is in flight"""
    pass


def portrait_prompt_factory(
    style: StyleParameters,
    aspect_ratio: AspectRatio = AspectRatio.AUTO,
) -> PromptFactory:
    """Factory handing the same composed prompt to every item of a run"""
    batch_prompt = BatchPrompt(
        prompt=compose_portrait_prompt(style),
        aspect_ratio=aspect_ratio,
        style=style,
    )
    return lambda item: batch_prompt


class RunBatchUseCase:
    """Sequential batch generation

    Items are processed strictly in order, one at a time. A failed item is
    recorded on the item and the run moves on; successes are written to
    history as soon as they arrive.
    """

    def __init__(
        self,
        provider: ImageProvider,
        normalizer: ImageNormalizer,
        history: Optional[HistoryFeed] = None,
        profile: NormalizationProfile = NormalizationProfile(),
    ):
        self._provider = provider
        self._normalizer = normalizer
        self._history = history
        self._profile = profile
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def execute(
        self,
        items: List[BatchItem],
        prompt_factory: PromptFactory,
        report_progress: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Drive every item to a terminal state

        Args:
            items: Pending items, mutated in place
            prompt_factory: Supplies prompt, framing and style per item
            report_progress: Called after every transition and once on completion

        Returns:
            Batch summary; ``preview`` is the first successful result

        Raises:
            BatchAlreadyRunningError: Another run is in flight
        """
        if self._running:
            raise BatchAlreadyRunningError("A batch run is already in progress")
        started = [item.id for item in items if item.status is not BatchStatus.PENDING]
        if started:
            raise InvalidTransitionError(
                f"Batch items already started: {', '.join(started)}; use retry_failed for a new run"
            )

        self._running = True
        total = len(items)
        logger.info(f"Starting batch run: items={total}")
        try:
            for index, item in enumerate(items):
                # 1. pending -> processing
                item.mark_processing()
                self._emit(report_progress, BatchProgress(index + 1, total, item.id, item.status))

                # 2. Generate; any failure stays on the item
                try:
                    outcome, batch_prompt, resolved = await self._process(item, prompt_factory)
                except Exception as e:
                    logger.exception(f"Batch item {item.id} failed unexpectedly")
                    outcome = GenerationOutcome.failure(ErrorKind.UNKNOWN, str(e))

                # 3. processing -> done | error
                if outcome.is_success:
                    item.mark_done(outcome.image)
                    await self._record(outcome, batch_prompt, resolved)
                else:
                    item.mark_failed(outcome.error_kind, outcome.detail)
                    logger.warning(
                        f"Batch item {index + 1}/{total} failed: {outcome.error_kind.value}"
                    )
                self._emit(report_progress, BatchProgress(index + 1, total, item.id, item.status))
        finally:
            self._running = False

        result = BatchResult(items=list(items))
        logger.info(
            f"Batch run finished: done={len(result.succeeded)}, failed={len(result.failed)}"
        )
        self._emit(report_progress, BatchProgress(total, total, is_complete=True))
        return result

    async def _process(self, item: BatchItem, prompt_factory: PromptFactory):
        batch_prompt = prompt_factory(item)
        try:
            image = self._normalizer.normalize(
                item.source, self._profile.max_edge, self._profile.quality
            )
        except ImageFormatError as e:
            return GenerationOutcome.failure(ErrorKind.FORMAT_ERROR, str(e)), batch_prompt, None

        resolved = select_aspect_ratio(
            batch_prompt.aspect_ratio, image.original_width, image.original_height
        )
        request = GenerationRequest(
            images=(image,),
            prompt=batch_prompt.prompt,
            aspect_ratio=resolved,
        )
        outcome = await self._provider.generate_image(request)
        return outcome, batch_prompt, resolved

    async def _record(self, outcome, batch_prompt: BatchPrompt, resolved: AspectRatio) -> None:
        if self._history is None:
            return
        await self._history.record(
            HistoryEntry(
                image=outcome.image,
                prompt=batch_prompt.prompt,
                aspect_ratio=resolved,
                mode=GenerationMode.BATCH,
                style=batch_prompt.style,
            )
        )

    @staticmethod
    def _emit(report_progress: Optional[ProgressCallback], progress: BatchProgress) -> None:
        if report_progress is None:
            return
        try:
            report_progress(progress)
        except Exception:
            logger.exception("Batch progress callback failed")
