"""Testing utilities and fakes for the city imagery pipeline."""

from .fakes import (
    FakeLogger,
    FakeResponse,
    FakeS3Client,
    FakeSearchClient,
    FakeSearchSession,
    RecordingSink,
    RecordingSleep,
    make_external_image,
    make_provider_photo,
    search_payload,
)

__all__ = [
    "FakeLogger",
    "FakeResponse",
    "FakeS3Client",
    "FakeSearchClient",
    "FakeSearchSession",
    "RecordingSink",
    "RecordingSleep",
    "make_external_image",
    "make_provider_photo",
    "search_payload",
]
