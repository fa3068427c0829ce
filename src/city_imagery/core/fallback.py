"""Fallback imagery for locations without usable live search results."""

import random
from typing import Iterable, List, Optional, Tuple

from .curated import CuratedImageRepository, DescriptorInput
from .exceptions import with_error_handling
from .models import CuratedDescriptor, ImageSource, NormalizedImage
from .normalization import location_slug

CURATED_PHOTOGRAPHER = "Local Photographer"
GENERIC_PHOTOGRAPHER = "Unsplash"
DEFAULT_LOCATION_LABEL = "City Center"

GENERIC_FALLBACK_CATEGORIES = (
    {
        "category": "Skyline",
        "url": "https://images.unsplash.com/photo-1512453979798-5ea266f8880c?w=800&h=600&fit=crop&q=80",
        "description": "Beautiful cityscape view of {name}",
        "tags": ("skyline", "urban", "modern"),
    },
    {
        "category": "Street Life",
        "url": "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=800&h=600&fit=crop&q=80",
        "description": "Vibrant street scene in {name}",
        "tags": ("street", "life", "culture"),
    },
    {
        "category": "Landmarks",
        "url": "https://images.unsplash.com/photo-1449824913935-59a10b8d2000?w=800&h=600&fit=crop&q=80",
        "description": "Famous landmarks and architecture of {name}",
        "tags": ("landmarks", "architecture", "historic"),
    },
    {
        "category": "Night Life",
        "url": "https://images.unsplash.com/photo-1477959858617-67f85cf4f1df?w=800&h=600&fit=crop&q=80",
        "description": "{name} city lights and nightlife",
        "tags": ("nightlife", "lights", "entertainment"),
    },
)

# Inclusive bounds for synthesized like counts.
CURATED_LIKES_RANGE = (50, 249)
GENERIC_LIKES_RANGE = (30, 179)


class FallbackResolver:
    """Resolve a complete image set for a location without any network I/O."""

    def __init__(
        self,
        repository: CuratedImageRepository,
        rng: Optional[random.Random] = None,
    ):
        self._repository = repository
        self._rng = rng or random.Random()

    def has_curated_imagery(self, name: str) -> bool:
        return self._repository.has_curated_imagery(name)

    def list_curated_slugs(self) -> List[str]:
        return self._repository.list_curated_slugs()

    def register_curated_imagery(
        self, slug: str, descriptors: Iterable[DescriptorInput]
    ) -> None:
        """Add or replace a curated entry in the backing repository."""
        self._repository.register_curated_imagery(slug, descriptors)

    @with_error_handling
    def resolve(self, name: str) -> List[NormalizedImage]:
        """
        Return curated imagery for the location if any exists, otherwise the
        generic placeholder set. The result is never empty.
        """
        slug = location_slug(name)
        descriptors = self._repository.get(slug)
        if descriptors:
            return self.curated_images(name, descriptors)
        return self.generic_images(name)

    def curated_images(
        self, name: str, descriptors: Tuple[CuratedDescriptor, ...]
    ) -> List[NormalizedImage]:
        slug = location_slug(name)
        images = []
        for index, descriptor in enumerate(descriptors):
            images.append(
                NormalizedImage(
                    id=f"curated-{slug}-{index + 1}",
                    url=descriptor.url,
                    title=descriptor.title or f"{name} View",
                    description=descriptor.description or f"Beautiful view of {name}",
                    photographer=CURATED_PHOTOGRAPHER,
                    location_label=descriptor.location_label or DEFAULT_LOCATION_LABEL,
                    like_count=self._rng.randint(*CURATED_LIKES_RANGE),
                    is_user_uploaded=self._rng.random() > 0.5,
                    tags=set(descriptor.tags or ("city", "travel")),
                    source=ImageSource.CURATED,
                )
            )
        return images

    def generic_images(self, name: str) -> List[NormalizedImage]:
        slug = location_slug(name)
        return [
            NormalizedImage(
                id=f"fallback-{slug}-{index}",
                url=entry["url"],
                title=f"{name} {entry['category']}",
                description=entry["description"].format(name=name),
                photographer=GENERIC_PHOTOGRAPHER,
                location_label=DEFAULT_LOCATION_LABEL,
                like_count=self._rng.randint(*GENERIC_LIKES_RANGE),
                is_user_uploaded=False,
                tags=set(entry["tags"]),
                source=ImageSource.EXTERNAL,
            )
            for index, entry in enumerate(GENERIC_FALLBACK_CATEGORIES)
        ]
