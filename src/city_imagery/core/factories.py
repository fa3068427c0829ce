"""Factory classes for creating configured service instances."""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional

import aiohttp
import boto3

from .curated import CuratedImageRepository
from .fallback import FallbackResolver
from .models import PipelineConfig, SearchClientConfig
from .observability import MetricsCollector, create_logger
from .protocols import (
    CollectionSink,
    HttpSessionProtocol,
    ImageSearchProtocol,
    LoggerProtocol,
    S3ClientProtocol,
)
from .search import UnsplashSearchClient
from .services import AsyncBatchProcessor, BatchOrchestrator, LocationImageService

USER_AGENT = "city-imagery-pipeline/0.1"


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(
        name: str = "city_imagery", level: Optional[str] = None
    ) -> LoggerProtocol:
        """Create a structured logger instance."""
        return create_logger(name, level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class HttpSessionFactory:
    """Factory for aiohttp sessions; must be called inside a running event loop."""

    @staticmethod
    def create_session(**kwargs: Any) -> aiohttp.ClientSession:
        headers = {"User-Agent": USER_AGENT}
        headers.update(kwargs.pop("headers", {}))
        return aiohttp.ClientSession(headers=headers, **kwargs)


class PipelineFactory:
    """Factory for creating the complete acquisition pipeline."""

    @staticmethod
    def create_search_client(
        session: HttpSessionProtocol,
        config: Optional[PipelineConfig] = None,
        search_config: Optional[SearchClientConfig] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> UnsplashSearchClient:
        """Create a search client paced according to the pipeline config."""
        config = config or PipelineConfig()
        search_config = search_config or SearchClientConfig.from_env()
        search_config = search_config.model_copy(
            update={
                "request_delay_ms": config.inter_request_delay_ms,
                "max_attempts": config.max_retries,
            }
        )
        return UnsplashSearchClient(
            session,
            search_config,
            logger=logger,
            metrics_collector=metrics_collector,
            sleep=sleep,
        )

    @staticmethod
    def create_pipeline(
        session: Optional[HttpSessionProtocol] = None,
        repository: Optional[CuratedImageRepository] = None,
        sink: Optional[CollectionSink] = None,
        search_client: Optional[ImageSearchProtocol] = None,
        config: Optional[PipelineConfig] = None,
        search_config: Optional[SearchClientConfig] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> BatchOrchestrator:
        """
        Create a fully configured orchestrator.

        Either ``search_client`` or ``session`` must be given. The curated
        repository doubles as the collection sink unless ``sink`` is passed.
        """
        if logger is None:
            logger = LoggerFactory.create_logger("city_imagery")

        if repository is None:
            repository = CuratedImageRepository.with_default_collections()

        if sink is None:
            sink = repository

        if search_client is None:
            if session is None:
                raise ValueError("Either a search client or an HTTP session is required")
            search_client = PipelineFactory.create_search_client(
                session,
                config=config,
                search_config=search_config,
                logger=logger,
                metrics_collector=metrics_collector,
                sleep=sleep,
            )

        fallback_resolver = FallbackResolver(repository, rng=rng)
        location_service = LocationImageService(search_client, fallback_resolver, logger)
        batch_processor = AsyncBatchProcessor(location_service, sink, logger)

        return BatchOrchestrator(batch_processor, logger, sleep=sleep)
