"""Shared data models for the city imagery pipeline."""

import os
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field


class LocationRequest(BaseModel):
    """A location the caller wants imagery for."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    country: str
    country_code: str = ""
    region: Optional[str] = None
    population: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ProviderUrls(BaseModel):
    """Image URLs at the resolutions the provider serves."""

    raw: str = ""
    full: str = ""
    regular: str
    small: str = ""
    thumb: str = ""


class ProviderProfileImage(BaseModel):
    small: str = ""


class ProviderUser(BaseModel):
    """Uploader identity as reported by the provider."""

    name: str = ""
    username: str = ""
    profile_image: ProviderProfileImage = Field(default_factory=ProviderProfileImage)


class ProviderLocation(BaseModel):
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class ProviderTag(BaseModel):
    title: str


class ExternalImage(BaseModel):
    """Provider-native photo record, read-only inside the pipeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    provider_id: str = Field(alias="id")
    urls: ProviderUrls
    alt_text: Optional[str] = Field(default=None, alias="alt_description")
    description: Optional[str] = None
    user: ProviderUser = Field(default_factory=ProviderUser)
    location: Optional[ProviderLocation] = None
    tags: List[ProviderTag] = Field(default_factory=list)
    like_count: int = Field(default=0, alias="likes")
    download_count: int = Field(default=0, alias="downloads")
    created_at: Optional[str] = None


class ImageSource(str, Enum):
    """Where an image's attribution comes from."""

    EXTERNAL = "external"
    USER = "user"
    CURATED = "curated"


class NormalizedImage(BaseModel):
    """Internal image record handed to the collection sink."""

    id: str
    url: str
    title: str
    description: str
    photographer: str
    location_label: str
    like_count: int = 0
    is_user_uploaded: bool = False
    tags: Set[str] = Field(default_factory=set)
    source: ImageSource
    provider_metadata: Optional[Dict[str, Any]] = None


class CuratedDescriptor(BaseModel):
    """Hand-authored, possibly partial image descriptor."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    location_label: Optional[str] = None
    tags: Optional[List[str]] = None


class BatchOutcome(BaseModel):
    """Result of processing a single location during a run."""

    model_config = ConfigDict(frozen=True)

    location_name: str
    country: str
    success: bool
    image_count: int = 0
    error_message: Optional[str] = None
    processing_time_ms: int = 0


class PipelineConfig(BaseModel):
    """Configuration for a pipeline run."""

    batch_size: int = 10
    inter_batch_delay_ms: int = 2000
    inter_request_delay_ms: int = 100
    max_retries: int = 3
    use_fallback_on_empty: bool = True
    images_per_location: int = 4


class RunStatistics(BaseModel):
    """Summary derived from the outcomes of one run."""

    total: int
    successful: int
    failed: int
    success_rate: float
    total_images: int
    avg_processing_time_ms: int


class SearchParams(BaseModel):
    """Parameters for a single provider search request."""

    query: str
    page: int = 1
    per_page: int = 5
    orientation: str = "landscape"
    order_by: str = "relevant"
    color: Optional[str] = None

    def to_query_params(self) -> Dict[str, str]:
        params = {
            "query": self.query,
            "page": str(self.page),
            "per_page": str(self.per_page),
            "orientation": self.orientation,
            "order_by": self.order_by,
        }
        if self.color:
            params["color"] = self.color
        return params


class SearchClientConfig(BaseModel):
    """Settings for the external image-search client."""

    access_key: str = ""
    base_url: str = "https://api.unsplash.com"
    request_delay_ms: int = 100
    max_attempts: int = 3
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls, **overrides: Any) -> "SearchClientConfig":
        """Build the client settings from environment variables."""
        values: Dict[str, Any] = {
            "access_key": os.getenv("UNSPLASH_ACCESS_KEY", ""),
            "base_url": os.getenv("UNSPLASH_API_URL", "https://api.unsplash.com"),
            "timeout_seconds": float(os.getenv("UNSPLASH_TIMEOUT_SECONDS", "10")),
        }
        values.update(overrides)
        return cls(**values)
