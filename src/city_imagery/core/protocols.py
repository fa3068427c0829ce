"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Protocol

from .models import (
    BatchOutcome,
    ExternalImage,
    LocationRequest,
    NormalizedImage,
    PipelineConfig,
)


class HttpSessionProtocol(Protocol):
    """Subset of aiohttp.ClientSession used by the search client."""

    def get(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Any = None,
    ) -> Any:
        """Return an async context manager yielding a response."""
        ...


class S3ClientProtocol(Protocol):
    """Protocol for S3 client operations."""

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class ImageSearchProtocol(Protocol):
    """Protocol for the external image search client."""

    def configure(self, config: PipelineConfig) -> None:
        """Adopt the pacing and attempt settings of a run."""
        ...

    async def get_location_images(
        self, name: str, country: str, max_images: int = 4
    ) -> List[ExternalImage]:
        """Return up to max_images unique provider images for a location."""
        ...


class CollectionSink(ABC):
    """Destination for the finalized image set of each location."""

    @abstractmethod
    def register_images(self, location_slug: str, images: List[NormalizedImage]) -> None:
        """Register (or replace) the images for a location slug."""
        ...


class BatchProcessor(ABC):
    """Abstract batch processor."""

    def configure(self, config: PipelineConfig) -> None:
        """Prepare collaborators for a run; no-op by default."""

    @abstractmethod
    async def process_batch(
        self, locations: List[LocationRequest], config: PipelineConfig
    ) -> List[BatchOutcome]:
        """Process a batch of locations."""
        ...
