"""Normalization helpers: slugs, search phrasing and provider record conversion."""

import re
from typing import List

from .models import CuratedDescriptor, ExternalImage, ImageSource, NormalizedImage

QUERY_MODIFIERS = (
    "skyline",
    "landmarks",
    "street",
    "culture",
    "architecture",
    "travel",
    "tourism",
)

SUGGESTION_MODIFIERS = (
    "skyline",
    "landmarks",
    "street life",
    "culture",
    "nightlife",
    "architecture",
)

_WHITESPACE = re.compile(r"\s+")


def location_slug(name: str) -> str:
    """
    Derive the lookup key for a location name.

    Lower-cases the name and replaces each run of whitespace with a hyphen,
    so "Ho Chi Minh City" becomes "ho-chi-minh-city".

    Args:
        name: Location name as supplied by the caller.

    Returns:
        The slug used by the curated repository and the collection sink.
    """
    return _WHITESPACE.sub("-", name.lower())


def build_search_queries(name: str, country: str) -> List[str]:
    """Return the ordered query templates tried for one location."""
    return [f"{name} {country}"] + [f"{name} {modifier}" for modifier in QUERY_MODIFIERS]


def get_image_search_suggestions(name: str, country: str) -> List[str]:
    """Return editorial search phrases for manually curating a location."""
    suggestions = [f"{name} {modifier}" for modifier in SUGGESTION_MODIFIERS]
    suggestions.append(f"{name} {country}")
    suggestions.extend([f"{name} travel", f"{name} tourism"])
    return suggestions


def to_normalized_image(image: ExternalImage, location_name: str) -> NormalizedImage:
    """
    Convert a provider record into the internal image format.

    Missing alt text and description fall back to templated text naming the
    location; attribution comes from the provider, so the record is marked as
    an external source.
    """
    location_label = "Unknown"
    if image.location is not None and image.location.name:
        location_label = image.location.name

    return NormalizedImage(
        id=f"unsplash-{image.provider_id}",
        url=image.urls.regular,
        title=image.alt_text or f"{location_name} View",
        description=image.description
        or image.alt_text
        or f"Beautiful view of {location_name}",
        photographer=image.user.name or image.user.username or "Unknown",
        location_label=location_label,
        like_count=image.like_count,
        is_user_uploaded=False,
        tags={tag.title for tag in image.tags},
        source=ImageSource.EXTERNAL,
        provider_metadata={
            "id": image.provider_id,
            "user": image.user.model_dump(),
            "downloads": image.download_count,
            "created_at": image.created_at,
        },
    )


def to_curated_descriptor(image: NormalizedImage) -> CuratedDescriptor:
    """Reduce a normalized image to the descriptor stored in the curated table."""
    return CuratedDescriptor(
        url=image.url,
        title=image.title,
        description=image.description,
        location_label=image.location_label,
        tags=sorted(image.tags),
    )
