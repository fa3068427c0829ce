"""Client for the Unsplash photo search API."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Union

import aiohttp
from pydantic import ValidationError

from .error_handling import is_retryable_status, retry_provider_request
from .exceptions import ProviderRequestError
from .models import ExternalImage, PipelineConfig, SearchClientConfig, SearchParams
from .normalization import build_search_queries
from .observability import LogContext, MetricsCollector, RequestMetric
from .protocols import HttpSessionProtocol, LoggerProtocol

# Upper bound on results requested by a single query.
MAX_RESULTS_PER_QUERY = 5


@dataclass
class QuerySuccess:
    """A provider query that returned a (possibly empty) result list."""

    query: str
    images: List[ExternalImage] = field(default_factory=list)


@dataclass
class QueryFailure:
    """A provider query that failed and contributes no images."""

    query: str
    reason: str
    status: Optional[int] = None


QueryResult = Union[QuerySuccess, QueryFailure]


class UnsplashSearchClient:
    """
    Cascading multi-query image search for a single location.

    Each location is searched with an ordered list of query templates. Results
    are deduplicated by provider id and accumulated until the requested count
    is reached or the templates run out. Requests for the same location are
    paced with a fixed delay; a failed query counts as an empty one.
    """

    def __init__(
        self,
        session: HttpSessionProtocol,
        config: SearchClientConfig,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._session = session
        self._config = config
        self._logger = logger
        self._metrics_collector = metrics_collector
        self.sleep = sleep

    def configure(self, config: PipelineConfig) -> None:
        """Apply a run's pacing and attempt settings to subsequent requests."""
        self._config = self._config.model_copy(
            update={
                "request_delay_ms": config.inter_request_delay_ms,
                "max_attempts": config.max_retries,
            }
        )

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    @property
    def request_delay_seconds(self) -> float:
        return self._config.request_delay_ms / 1000

    def _headers(self) -> dict:
        return {
            "Authorization": f"Client-ID {self._config.access_key}",
            "Accept-Version": "v1",
        }

    @retry_provider_request()
    async def _fetch_photos(self, params: SearchParams) -> List[ExternalImage]:
        """Issue one search request and parse its payload."""
        start_time = time.time()
        success = False
        status = None
        error_message = None
        try:
            async with self._session.get(
                f"{self._config.base_url}/search/photos",
                params=params.to_query_params(),
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self._config.timeout_seconds),
            ) as response:
                status = response.status
                if response.status != 200:
                    raise ProviderRequestError(
                        f"Unsplash API error: {response.status}",
                        status=response.status,
                        retryable=is_retryable_status(response.status),
                    )
                payload = await response.json()

            results = payload.get("results") if isinstance(payload, dict) else None
            if not isinstance(results, list):
                raise ProviderRequestError("Malformed search payload: missing results")
            images = [ExternalImage.model_validate(record) for record in results]
            success = True
            return images

        except ProviderRequestError as e:
            error_message = str(e)
            raise
        except asyncio.TimeoutError as e:
            error_message = "request timed out"
            raise ProviderRequestError(
                f"Unsplash request timed out after {self._config.timeout_seconds}s",
                retryable=True,
            ) from e
        except aiohttp.ContentTypeError as e:
            error_message = f"Unexpected content type in search payload: {e.message}"
            raise ProviderRequestError(error_message) from e
        except aiohttp.ClientError as e:
            error_message = str(e)
            raise ProviderRequestError(f"Network error: {e}", retryable=True) from e
        except ValidationError as e:
            error_message = str(e)
            raise ProviderRequestError(f"Malformed search payload: {e}") from e
        except ValueError as e:
            error_message = str(e)
            raise ProviderRequestError(f"Invalid JSON in search payload: {e}") from e
        finally:
            if self._metrics_collector is not None:
                self._metrics_collector.record_metric(
                    RequestMetric(
                        operation="search_photos",
                        start_time=start_time,
                        end_time=time.time(),
                        success=success,
                        status=status,
                        error_message=error_message,
                        query=params.query,
                    )
                )

    async def search_photos(self, params: SearchParams) -> QueryResult:
        """Run one query, reporting failure as a value instead of raising."""
        try:
            images = await self._fetch_photos(params)
        except ProviderRequestError as e:
            if self._logger:
                context = LogContext(
                    operation="search_photos", component="unsplash_search_client"
                ).with_metadata(query=params.query, status=e.status)
                self._logger.warning(f"Search query failed: {e}", context)
            return QueryFailure(query=params.query, reason=str(e), status=e.status)
        return QuerySuccess(query=params.query, images=images)

    async def iter_query_batches(
        self, name: str, country: str, remaining: Callable[[], int]
    ) -> AsyncIterator[QueryResult]:
        """
        Yield one result per query template until nothing more is needed.

        ``remaining`` is consulted before every query; the sequence ends as
        soon as it reports zero or the templates are exhausted.
        """
        for index, query in enumerate(build_search_queries(name, country)):
            needed = remaining()
            if needed <= 0:
                return
            if index > 0:
                await self.sleep(self.request_delay_seconds)
            yield await self.search_photos(
                SearchParams(query=query, per_page=min(MAX_RESULTS_PER_QUERY, needed))
            )

    async def get_location_images(
        self, name: str, country: str, max_images: int = 4
    ) -> List[ExternalImage]:
        """
        Return up to ``max_images`` unique images for a location.

        Never raises for provider problems: an empty list means no live
        imagery was available.
        """
        if max_images <= 0:
            return []
        if not self._config.access_key:
            if self._logger:
                self._logger.warning(
                    f"No Unsplash access key configured, skipping live search for {name}"
                )
            return []

        collected: List[ExternalImage] = []
        seen_ids = set()

        async for result in self.iter_query_batches(
            name, country, lambda: max_images - len(collected)
        ):
            if isinstance(result, QueryFailure):
                continue
            for image in result.images:
                if len(collected) >= max_images:
                    break
                if image.provider_id in seen_ids:
                    continue
                seen_ids.add(image.provider_id)
                collected.append(image)

        if self._logger:
            self._logger.debug(
                f"Collected {len(collected)} unique images for {name}, {country}"
            )
        return collected
