"""Tests for core data models."""

import pytest
from pydantic import ValidationError

from city_imagery.core.models import (
    BatchOutcome,
    CuratedDescriptor,
    ExternalImage,
    ImageSource,
    LocationRequest,
    NormalizedImage,
    PipelineConfig,
    SearchClientConfig,
    SearchParams,
)
from city_imagery.testing.fakes import make_provider_photo


class TestPipelineConfig:
    """Tests for PipelineConfig."""

    def test_pipeline_config_default_values(self):
        """Test PipelineConfig default values."""
        config = PipelineConfig()
        assert config.batch_size == 10
        assert config.inter_batch_delay_ms == 2000
        assert config.inter_request_delay_ms == 100
        assert config.max_retries == 3
        assert config.use_fallback_on_empty is True
        assert config.images_per_location == 4

    def test_pipeline_config_all_parameters(self):
        """Test creating PipelineConfig with all parameters."""
        config = PipelineConfig(
            batch_size=5,
            inter_batch_delay_ms=0,
            inter_request_delay_ms=250,
            max_retries=1,
            use_fallback_on_empty=False,
            images_per_location=6,
        )
        assert config.batch_size == 5
        assert config.inter_batch_delay_ms == 0
        assert config.inter_request_delay_ms == 250
        assert config.max_retries == 1
        assert config.use_fallback_on_empty is False
        assert config.images_per_location == 6


class TestLocationRequest:
    """Tests for LocationRequest."""

    def test_location_request_required_only(self):
        location = LocationRequest(name="Lisbon", country="Portugal")
        assert location.name == "Lisbon"
        assert location.country == "Portugal"
        assert location.country_code == ""
        assert location.region is None
        assert location.population is None

    def test_location_request_is_immutable(self):
        location = LocationRequest(name="Lisbon", country="Portugal")
        with pytest.raises(ValidationError):
            location.name = "Porto"


class TestExternalImage:
    """Tests for parsing provider records."""

    def test_parses_provider_payload(self):
        image = ExternalImage.model_validate(make_provider_photo("abc"))
        assert image.provider_id == "abc"
        assert image.urls.regular.endswith("w=1080")
        assert image.alt_text == "photo abc"
        assert image.user.name == "Jane Doe"
        assert image.location.name == "Old Town"
        assert [tag.title for tag in image.tags] == ["city", "travel"]
        assert image.like_count == 42
        assert image.download_count == 100

    def test_optional_fields_may_be_missing(self):
        image = ExternalImage.model_validate(
            {"id": "min", "urls": {"regular": "https://example.com/min.jpg"}}
        )
        assert image.location is None
        assert image.tags == []
        assert image.like_count == 0

    def test_missing_urls_is_invalid(self):
        with pytest.raises(ValidationError):
            ExternalImage.model_validate({"id": "broken"})


class TestNormalizedImage:
    """Tests for NormalizedImage."""

    def test_normalized_image_defaults(self):
        image = NormalizedImage(
            id="curated-1",
            url="https://example.com/1.jpg",
            title="Title",
            description="Description",
            photographer="Someone",
            location_label="City Center",
            source=ImageSource.CURATED,
        )
        assert image.like_count == 0
        assert image.is_user_uploaded is False
        assert image.tags == set()
        assert image.provider_metadata is None

    def test_image_source_values(self):
        assert ImageSource.EXTERNAL.value == "external"
        assert ImageSource.USER.value == "user"
        assert ImageSource.CURATED.value == "curated"


class TestBatchOutcome:
    """Tests for BatchOutcome."""

    def test_batch_outcome_minimal(self):
        outcome = BatchOutcome(location_name="Lisbon", country="Portugal", success=True)
        assert outcome.image_count == 0
        assert outcome.error_message is None
        assert outcome.processing_time_ms == 0

    def test_batch_outcome_is_immutable(self):
        outcome = BatchOutcome(location_name="Lisbon", country="Portugal", success=True)
        with pytest.raises(ValidationError):
            outcome.success = False


class TestCuratedDescriptor:
    def test_all_fields_optional(self):
        descriptor = CuratedDescriptor()
        assert descriptor.url == ""
        assert descriptor.title is None
        assert descriptor.tags is None


class TestSearchParams:
    def test_query_params_defaults(self):
        params = SearchParams(query="Lisbon Portugal")
        assert params.to_query_params() == {
            "query": "Lisbon Portugal",
            "page": "1",
            "per_page": "5",
            "orientation": "landscape",
            "order_by": "relevant",
        }

    def test_query_params_include_color(self):
        params = SearchParams(query="Lisbon", per_page=2, color="blue")
        query_params = params.to_query_params()
        assert query_params["color"] == "blue"
        assert query_params["per_page"] == "2"


class TestSearchClientConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("UNSPLASH_ACCESS_KEY", "secret")
        monkeypatch.setenv("UNSPLASH_TIMEOUT_SECONDS", "2.5")
        monkeypatch.delenv("UNSPLASH_API_URL", raising=False)

        config = SearchClientConfig.from_env()

        assert config.access_key == "secret"
        assert config.base_url == "https://api.unsplash.com"
        assert config.timeout_seconds == 2.5

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.delenv("UNSPLASH_ACCESS_KEY", raising=False)
        config = SearchClientConfig.from_env(access_key="override", max_attempts=1)
        assert config.access_key == "override"
        assert config.max_attempts == 1
