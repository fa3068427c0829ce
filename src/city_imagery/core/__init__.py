"""Core utilities and shared components for the city imagery pipeline."""

from .logging_config import (
    get_logger,
    quiet_library_loggers,
    set_debug_logging,
    setup_logger,
)
from .exceptions import (
    CityImageryError,
    ProviderRequestError,
    LocationProcessingError,
    ConfigurationError,
    ReportExportError,
    with_error_handling,
    location_error_handler,
)
from .models import (
    BatchOutcome,
    CuratedDescriptor,
    ExternalImage,
    ImageSource,
    LocationRequest,
    NormalizedImage,
    PipelineConfig,
    RunStatistics,
    SearchClientConfig,
    SearchParams,
)
from .normalization import (
    build_search_queries,
    get_image_search_suggestions,
    location_slug,
    to_normalized_image,
)
from .curated import CuratedImageRepository
from .fallback import FallbackResolver
from .reporting import get_run_statistics, locations_needing_curation

__all__ = [
    "LocationRequest",
    "ExternalImage",
    "NormalizedImage",
    "ImageSource",
    "CuratedDescriptor",
    "BatchOutcome",
    "PipelineConfig",
    "RunStatistics",
    "SearchClientConfig",
    "SearchParams",
    "build_search_queries",
    "get_image_search_suggestions",
    "location_slug",
    "to_normalized_image",
    "CuratedImageRepository",
    "FallbackResolver",
    "get_run_statistics",
    "locations_needing_curation",
    "setup_logger",
    "get_logger",
    "quiet_library_loggers",
    "set_debug_logging",
    "CityImageryError",
    "ProviderRequestError",
    "LocationProcessingError",
    "ConfigurationError",
    "ReportExportError",
    "with_error_handling",
    "location_error_handler",
]
