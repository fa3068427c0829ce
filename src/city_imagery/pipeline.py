"""
City image acquisition runner

Locations → Live search (Unsplash) → Fallback imagery → Collection sink
Runs the orchestrator over a location list and logs the run summary.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from .core import (
    BatchOutcome,
    ConfigurationError,
    CuratedImageRepository,
    LocationRequest,
    PipelineConfig,
    SearchClientConfig,
    get_logger,
    get_run_statistics,
    locations_needing_curation,
)
from .core.factories import HttpSessionFactory, LoggerFactory, PipelineFactory
from .core.observability import MetricsCollector
from .core.protocols import CollectionSink, ImageSearchProtocol, LoggerProtocol
from .core.reporting import estimate_run

SAMPLE_LOCATIONS = [
    # Asia
    ("Bangkok", "Thailand", "TH"),
    ("Chiang Mai", "Thailand", "TH"),
    ("Tokyo", "Japan", "JP"),
    ("Seoul", "South Korea", "KR"),
    ("Singapore", "Singapore", "SG"),
    ("Kuala Lumpur", "Malaysia", "MY"),
    ("Ho Chi Minh City", "Vietnam", "VN"),
    ("Hanoi", "Vietnam", "VN"),
    ("Manila", "Philippines", "PH"),
    ("Jakarta", "Indonesia", "ID"),
    # Europe
    ("Lisbon", "Portugal", "PT"),
    ("Porto", "Portugal", "PT"),
    ("Barcelona", "Spain", "ES"),
    ("Madrid", "Spain", "ES"),
    ("Valencia", "Spain", "ES"),
    ("Berlin", "Germany", "DE"),
    ("Hamburg", "Germany", "DE"),
    ("Amsterdam", "Netherlands", "NL"),
    ("Rotterdam", "Netherlands", "NL"),
    ("Prague", "Czech Republic", "CZ"),
    ("Budapest", "Hungary", "HU"),
    ("Krakow", "Poland", "PL"),
    ("Warsaw", "Poland", "PL"),
    ("Vienna", "Austria", "AT"),
    ("Zurich", "Switzerland", "CH"),
    ("Geneva", "Switzerland", "CH"),
    ("Stockholm", "Sweden", "SE"),
    ("Copenhagen", "Denmark", "DK"),
    ("Oslo", "Norway", "NO"),
    ("Helsinki", "Finland", "FI"),
    # Americas
    ("Mexico City", "Mexico", "MX"),
    ("Guadalajara", "Mexico", "MX"),
    ("Playa del Carmen", "Mexico", "MX"),
    ("Buenos Aires", "Argentina", "AR"),
    ("Santiago", "Chile", "CL"),
    ("Lima", "Peru", "PE"),
    ("Bogota", "Colombia", "CO"),
    ("Medellin", "Colombia", "CO"),
    ("Sao Paulo", "Brazil", "BR"),
    ("Rio de Janeiro", "Brazil", "BR"),
    ("Florianopolis", "Brazil", "BR"),
    # Middle East & Africa
    ("Dubai", "UAE", "AE"),
    ("Abu Dhabi", "UAE", "AE"),
    ("Tel Aviv", "Israel", "IL"),
    ("Cape Town", "South Africa", "ZA"),
    ("Johannesburg", "South Africa", "ZA"),
    ("Cairo", "Egypt", "EG"),
    ("Marrakech", "Morocco", "MA"),
    ("Casablanca", "Morocco", "MA"),
    # Caucasus, Central & South Asia
    ("Istanbul", "Turkey", "TR"),
    ("Antalya", "Turkey", "TR"),
    ("Tbilisi", "Georgia", "GE"),
    ("Yerevan", "Armenia", "AM"),
    ("Baku", "Azerbaijan", "AZ"),
    ("Almaty", "Kazakhstan", "KZ"),
    ("Tashkent", "Uzbekistan", "UZ"),
    ("Kathmandu", "Nepal", "NP"),
    ("Colombo", "Sri Lanka", "LK"),
    ("Dhaka", "Bangladesh", "BD"),
]


def generate_sample_locations(count: int = 50) -> List[LocationRequest]:
    """Return the first ``count`` entries of the built-in city catalog."""
    return [
        LocationRequest(name=name, country=country, country_code=code)
        for name, country, code in SAMPLE_LOCATIONS[: max(count, 0)]
    ]


def load_locations(path: Union[str, Path]) -> List[LocationRequest]:
    """
    Load locations from a JSON file containing a list of objects.

    Raises:
        ConfigurationError: If the file cannot be read or has invalid entries.
    """
    try:
        records = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(records, list):
            raise ValueError("expected a JSON list of locations")
        return [LocationRequest.model_validate(record) for record in records]
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid locations file {path}: {e}") from e


def log_configuration(config: PipelineConfig, location_count: int):
    """Log run configuration."""
    logger = get_logger("pipeline")
    batches, pause_seconds = estimate_run(location_count, config)
    logger.info("=" * 80)
    logger.info("CITY IMAGE ACQUISITION")
    logger.info("=" * 80)
    logger.info("CONFIGURATION:")
    logger.info(f"  Locations:           {location_count}")
    logger.info(f"  Batch Size:          {config.batch_size}")
    logger.info(f"  Batch Delay:         {config.inter_batch_delay_ms}ms")
    logger.info(f"  Request Delay:       {config.inter_request_delay_ms}ms")
    logger.info(f"  Max Attempts:        {config.max_retries}")
    logger.info(f"  Images per Location: {config.images_per_location}")
    logger.info(f"  Fallback on Empty:   {'Enabled' if config.use_fallback_on_empty else 'Disabled'}")
    logger.info(f"  Estimated Batches:   {batches} (at least {pause_seconds:.0f}s of pauses)")
    logger.info("=" * 80)


def log_final_statistics(outcomes: List[BatchOutcome], total_time: float):
    """Log final run statistics."""
    logger = get_logger("pipeline")
    stats = get_run_statistics(outcomes)

    logger.info("=" * 80)
    logger.info("PROCESSING COMPLETED")
    logger.info("=" * 80)
    logger.info(f"Total execution time: {total_time:.1f}s")
    logger.info(f"Locations processed: {stats.total}")
    logger.info(f"Successful: {stats.successful} ({stats.success_rate:.1f}%)")
    logger.info(f"Failed: {stats.failed}")
    logger.info(f"Total images: {stats.total_images}")
    logger.info(f"Average processing time: {stats.avg_processing_time_ms}ms")

    needs_curation = locations_needing_curation(outcomes)
    if needs_curation:
        logger.warning(
            "Locations needing manual curation: "
            + ", ".join(o.location_name for o in needs_curation)
        )
    logger.info("=" * 80)


async def run_pipeline_async(
    locations: Sequence[LocationRequest],
    config: Optional[PipelineConfig] = None,
    repository: Optional[CuratedImageRepository] = None,
    sink: Optional[CollectionSink] = None,
    search_client: Optional[ImageSearchProtocol] = None,
    search_config: Optional[SearchClientConfig] = None,
    logger: Optional[LoggerProtocol] = None,
    metrics_collector: Optional[MetricsCollector] = None,
    log_level: Optional[str] = None,
) -> List[BatchOutcome]:
    """
    Run a full acquisition over ``locations``.

    Opens an aiohttp session for the run unless a search client is supplied.
    ``log_level`` sets the level of the run logger when none is passed in.
    """
    config = config or PipelineConfig()
    if logger is None:
        logger = LoggerFactory.create_logger("city_imagery", level=log_level)
    log_configuration(config, len(locations))
    start_time = time.time()

    if search_client is not None:
        orchestrator = PipelineFactory.create_pipeline(
            repository=repository,
            sink=sink,
            search_client=search_client,
            config=config,
            logger=logger,
        )
        outcomes = await orchestrator.process_all(locations, config)
    else:
        async with HttpSessionFactory.create_session() as session:
            orchestrator = PipelineFactory.create_pipeline(
                session=session,
                repository=repository,
                sink=sink,
                config=config,
                search_config=search_config,
                logger=logger,
                metrics_collector=metrics_collector,
            )
            outcomes = await orchestrator.process_all(locations, config)

    log_final_statistics(outcomes, time.time() - start_time)
    return outcomes


def run_pipeline(
    locations: Sequence[LocationRequest],
    config: Optional[PipelineConfig] = None,
    **kwargs,
) -> List[BatchOutcome]:
    """
    Synchronous wrapper around ``run_pipeline_async``.

    Args:
        locations: Locations to acquire imagery for
        config: Run configuration
        **kwargs: Passed through to ``run_pipeline_async``

    Returns:
        One outcome per location, in input order
    """
    return asyncio.run(run_pipeline_async(locations, config, **kwargs))
