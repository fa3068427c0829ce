"""Service implementations for the city image acquisition pipeline."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence

from .error_handling import BatchOperationContextManager
from .exceptions import CityImageryError, ConfigurationError, location_error_handler
from .fallback import FallbackResolver
from .models import (
    BatchOutcome,
    LocationRequest,
    NormalizedImage,
    PipelineConfig,
    RunStatistics,
)
from .normalization import location_slug, to_normalized_image
from .observability import LogContext
from .protocols import (
    BatchProcessor,
    CollectionSink,
    ImageSearchProtocol,
    LoggerProtocol,
)
from .reporting import get_run_statistics


def validate_pipeline_config(config: PipelineConfig) -> None:
    """Reject configurations that would stall or misbehave during a run."""
    if config.batch_size < 1:
        raise ConfigurationError(f"batch_size must be >= 1, got {config.batch_size}")
    if config.images_per_location < 1:
        raise ConfigurationError(
            f"images_per_location must be >= 1, got {config.images_per_location}"
        )
    if config.max_retries < 1:
        raise ConfigurationError(f"max_retries must be >= 1, got {config.max_retries}")
    if config.inter_batch_delay_ms < 0 or config.inter_request_delay_ms < 0:
        raise ConfigurationError("Pacing delays must not be negative")


def partition(
    locations: Sequence[LocationRequest], batch_size: int
) -> Iterator[List[LocationRequest]]:
    """Split locations into contiguous batches, preserving input order."""
    for i in range(0, len(locations), batch_size):
        yield list(locations[i : i + batch_size])


@dataclass
class ResolvedImages:
    """Image set computed for one location, before registration."""

    location: LocationRequest
    slug: str
    images: List[NormalizedImage] = field(default_factory=list)
    origin: str = "none"  # 'live', 'fallback' or 'none'


class LocationImageService:
    """Compute the image set for a single location without side effects."""

    def __init__(
        self,
        search_client: ImageSearchProtocol,
        fallback_resolver: FallbackResolver,
        logger: LoggerProtocol,
    ):
        self._search_client = search_client
        self._fallback_resolver = fallback_resolver
        self._logger = logger

    def configure(self, config: PipelineConfig) -> None:
        """Forward run pacing and attempt settings to the search client."""
        self._search_client.configure(config)

    async def resolve_images(
        self, location: LocationRequest, config: PipelineConfig
    ) -> ResolvedImages:
        """Search live imagery and fall back when nothing usable comes back."""
        resolved = ResolvedImages(location=location, slug=location_slug(location.name))

        external_images = await self._search_client.get_location_images(
            location.name, location.country, config.images_per_location
        )

        if external_images:
            resolved.images = [
                to_normalized_image(image, location.name) for image in external_images
            ]
            resolved.origin = "live"
        elif config.use_fallback_on_empty:
            resolved.images = self._fallback_resolver.resolve(location.name)
            resolved.origin = "fallback"

        return resolved


class AsyncBatchProcessor(BatchProcessor):
    """Process every location of a batch concurrently and wait for all of them."""

    def __init__(
        self,
        location_service: LocationImageService,
        sink: CollectionSink,
        logger: LoggerProtocol,
    ):
        self._location_service = location_service
        self._sink = sink
        self._logger = logger

    def configure(self, config: PipelineConfig) -> None:
        self._location_service.configure(config)

    async def process_location(
        self, location: LocationRequest, config: PipelineConfig
    ) -> BatchOutcome:
        """Process a single location, converting any failure into an outcome."""
        start_time = time.perf_counter()
        log_context = LogContext(
            operation="process_location", component="batch_processor"
        ).with_metadata(location=location.name, country=location.country)

        try:
            with location_error_handler():
                resolved = await self._location_service.resolve_images(location, config)
                if resolved.images:
                    self._sink.register_images(resolved.slug, resolved.images)
        except CityImageryError as e:
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            self._logger.error(f"Error processing {location.name}: {e}", log_context)
            return BatchOutcome(
                location_name=location.name,
                country=location.country,
                success=False,
                image_count=0,
                error_message=str(e),
                processing_time_ms=elapsed_ms,
            )

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        image_count = len(resolved.images)
        if resolved.origin == "live":
            self._logger.info(f"{location.name}: found {image_count} images", log_context)
        elif resolved.origin == "fallback":
            self._logger.warning(
                f"{location.name}: using {image_count} fallback images", log_context
            )
        else:
            self._logger.warning(f"{location.name}: no images found", log_context)

        return BatchOutcome(
            location_name=location.name,
            country=location.country,
            success=True,
            image_count=image_count,
            processing_time_ms=elapsed_ms,
        )

    async def process_batch(
        self, locations: List[LocationRequest], config: PipelineConfig
    ) -> List[BatchOutcome]:
        """Process a batch of locations concurrently, preserving input order."""
        tasks = [self.process_location(location, config) for location in locations]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: List[BatchOutcome] = []
        for location, result in zip(locations, results):
            if isinstance(result, BaseException):
                outcomes.append(
                    BatchOutcome(
                        location_name=location.name,
                        country=location.country,
                        success=False,
                        image_count=0,
                        error_message=str(result) or type(result).__name__,
                    )
                )
            else:
                outcomes.append(result)
        return outcomes


class BatchOrchestrator:
    """Main orchestrator: batches, paces and aggregates a full run."""

    def __init__(
        self,
        batch_processor: BatchProcessor,
        logger: LoggerProtocol,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._batch_processor = batch_processor
        self._logger = logger
        self._sleep = sleep

    async def process_all(
        self,
        locations: Sequence[LocationRequest],
        config: Optional[PipelineConfig] = None,
    ) -> List[BatchOutcome]:
        """
        Process every location and return one outcome per location.

        Batches run strictly one after another with a pause between them.
        Per-location failures are recorded in the outcomes and never raised.

        Args:
            locations: Locations to acquire imagery for, in the desired order.
            config: Run configuration; defaults to ``PipelineConfig()``.

        Returns:
            Outcomes in the same order as ``locations``.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        config = config or PipelineConfig()
        validate_pipeline_config(config)
        self._batch_processor.configure(config)

        batches = list(partition(locations, config.batch_size))
        outcomes: List[BatchOutcome] = []

        self._logger.info(
            f"Starting batch processing for {len(locations)} locations",
            batch_size=config.batch_size,
            batch_delay_ms=config.inter_batch_delay_ms,
        )

        with BatchOperationContextManager(
            operation_name="City image acquisition"
        ) as batch_manager:
            for index, batch in enumerate(batches):
                self._logger.info(f"Processing batch {index + 1}/{len(batches)}")

                batch_outcomes = await self._batch_processor.process_batch(batch, config)

                failed = batch_manager.record_outcomes(batch_outcomes)
                outcomes.extend(batch_outcomes)

                self._logger.info(
                    f"Batch {index + 1}/{len(batches)} summary: "
                    f"{len(batch_outcomes) - failed} succeeded, {failed} failed"
                )

                if index < len(batches) - 1:
                    self._logger.debug(
                        f"Waiting {config.inter_batch_delay_ms}ms before next batch"
                    )
                    await self._sleep(config.inter_batch_delay_ms / 1000)

        return outcomes

    @staticmethod
    def get_run_statistics(outcomes: List[BatchOutcome]) -> RunStatistics:
        return get_run_statistics(outcomes)
