"""Curated image repository shared by the orchestrator and the fallback resolver."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .models import CuratedDescriptor, NormalizedImage
from .normalization import location_slug, to_curated_descriptor
from .protocols import CollectionSink

DescriptorInput = Union[CuratedDescriptor, Mapping[str, Any]]


def _photo(photo_id: str) -> str:
    return f"https://images.unsplash.com/{photo_id}?w=800&h=600&fit=crop&q=80"


DEFAULT_CURATED_COLLECTIONS: Dict[str, List[Dict[str, Any]]] = {
    "bangkok": [
        {
            "url": _photo("photo-1552465011-b4e21bf6e79a"),
            "title": "Bangkok Temples",
            "description": "Traditional Thai temples and golden architecture",
            "location_label": "Temple District",
            "tags": ["temple", "culture", "architecture"],
        },
        {
            "url": _photo("photo-1528181304800-259b08848526"),
            "title": "Bangkok Street Food",
            "description": "Famous street food markets and local cuisine",
            "location_label": "Chinatown",
            "tags": ["food", "street", "culture"],
        },
        {
            "url": _photo("photo-1578662996442-48f60103fc96"),
            "title": "Bangkok Skyline",
            "description": "Modern skyline with traditional elements",
            "location_label": "Sukhumvit",
            "tags": ["skyline", "modern", "urban"],
        },
    ],
    "tokyo": [
        {
            "url": _photo("photo-1540959733332-eab4deabeeaf"),
            "title": "Tokyo Shibuya",
            "description": "Famous Shibuya crossing and neon lights",
            "location_label": "Shibuya",
            "tags": ["neon", "crossing", "urban"],
        },
        {
            "url": _photo("photo-1493976040374-85c8e12f0c0e"),
            "title": "Tokyo Traditional",
            "description": "Traditional temples and peaceful gardens",
            "location_label": "Asakusa",
            "tags": ["temple", "traditional", "garden"],
        },
        {
            "url": _photo("photo-1540959733332-eab4deabeeaf"),
            "title": "Tokyo Cherry Blossoms",
            "description": "Beautiful cherry blossom season",
            "location_label": "Ueno Park",
            "tags": ["cherry-blossom", "nature", "spring"],
        },
    ],
    "lisbon": [
        {
            "url": _photo("photo-1555881400-74d7acaacd8b"),
            "title": "Lisbon Tram",
            "description": "Famous yellow trams and historic streets",
            "location_label": "Alfama",
            "tags": ["tram", "historic", "street"],
        },
        {
            "url": _photo("photo-1571115764595-644a1f56a55c"),
            "title": "Lisbon Belem",
            "description": "Historic Belem Tower and waterfront",
            "location_label": "Belem",
            "tags": ["historic", "waterfront", "tower"],
        },
        {
            "url": _photo("photo-1555881400-74d7acaacd8b"),
            "title": "Lisbon Hills",
            "description": "Beautiful hills and viewpoints",
            "location_label": "Bairro Alto",
            "tags": ["hills", "viewpoint", "scenic"],
        },
    ],
    "barcelona": [
        {
            "url": _photo("photo-1539037116277-4db20889f2d4"),
            "title": "Sagrada Familia",
            "description": "Gaudi's masterpiece cathedral",
            "location_label": "Eixample",
            "tags": ["gaudi", "cathedral", "architecture"],
        },
        {
            "url": _photo("photo-1558642452-9d2a7deb7f62"),
            "title": "Barcelona Beach",
            "description": "Beautiful Mediterranean coastline",
            "location_label": "Barceloneta",
            "tags": ["beach", "mediterranean", "coastline"],
        },
        {
            "url": _photo("photo-1539037116277-4db20889f2d4"),
            "title": "Barcelona Gothic Quarter",
            "description": "Historic Gothic Quarter streets",
            "location_label": "Gothic Quarter",
            "tags": ["gothic", "historic", "narrow-streets"],
        },
    ],
    "berlin": [
        {
            "url": _photo("photo-1587330979470-3595ac045cb0"),
            "title": "Berlin Wall",
            "description": "Historic Berlin Wall and street art",
            "location_label": "East Side Gallery",
            "tags": ["wall", "street-art", "history"],
        },
        {
            "url": _photo("photo-1528722828814-77b9b83aafb2"),
            "title": "Berlin Nightlife",
            "description": "Vibrant nightlife and culture",
            "location_label": "Kreuzberg",
            "tags": ["nightlife", "culture", "vibrant"],
        },
        {
            "url": _photo("photo-1587330979470-3595ac045cb0"),
            "title": "Berlin Brandenburg Gate",
            "description": "Iconic Brandenburg Gate",
            "location_label": "Mitte",
            "tags": ["landmark", "iconic", "historic"],
        },
    ],
    "amsterdam": [
        {
            "url": _photo("photo-1512470876302-972faa2aa9a4"),
            "title": "Amsterdam Canals",
            "description": "Beautiful canal houses and waterways",
            "location_label": "Canal District",
            "tags": ["canals", "houses", "waterways"],
        },
        {
            "url": _photo("photo-1558618666-fcd25c85cd64"),
            "title": "Amsterdam Bikes",
            "description": "Famous cycling culture and bike paths",
            "location_label": "City Center",
            "tags": ["bikes", "cycling", "culture"],
        },
        {
            "url": _photo("photo-1512470876302-972faa2aa9a4"),
            "title": "Amsterdam Tulips",
            "description": "Beautiful tulip fields and gardens",
            "location_label": "Keukenhof",
            "tags": ["tulips", "flowers", "gardens"],
        },
    ],
    "paris": [
        {
            "url": _photo("photo-1502602898536-47ad22581b52"),
            "title": "Eiffel Tower",
            "description": "Iconic Eiffel Tower and Paris skyline",
            "location_label": "Champ de Mars",
            "tags": ["eiffel-tower", "landmark", "iconic"],
        },
        {
            "url": _photo("photo-1550340499-a6c60fc8287c"),
            "title": "Paris Cafes",
            "description": "Charming Parisian cafes and streets",
            "location_label": "Montmartre",
            "tags": ["cafes", "charming", "streets"],
        },
        {
            "url": _photo("photo-1502602898536-47ad22581b52"),
            "title": "Paris Seine",
            "description": "Beautiful Seine River and bridges",
            "location_label": "Seine River",
            "tags": ["river", "bridges", "romantic"],
        },
    ],
    "london": [
        {
            "url": _photo("photo-1513635269975-59663e0ac1ad"),
            "title": "Big Ben",
            "description": "Iconic Big Ben and Westminster",
            "location_label": "Westminster",
            "tags": ["big-ben", "landmark", "historic"],
        },
        {
            "url": _photo("photo-1513635269975-59663e0ac1ad"),
            "title": "London Bridge",
            "description": "Famous Tower Bridge",
            "location_label": "Tower Bridge",
            "tags": ["bridge", "iconic", "thames"],
        },
        {
            "url": _photo("photo-1513635269975-59663e0ac1ad"),
            "title": "London Pubs",
            "description": "Traditional British pubs and culture",
            "location_label": "Covent Garden",
            "tags": ["pubs", "culture", "traditional"],
        },
    ],
}


class CuratedImageRepository(CollectionSink):
    """
    Slug-keyed table of curated image descriptors.

    One instance is built at process start, optionally pre-seeded, and passed
    to both the orchestrator (as its collection sink) and the fallback
    resolver. Entries are stored as tuples and replaced wholesale on
    re-registration; an existing entry is never mutated in place.
    """

    def __init__(
        self, collections: Optional[Mapping[str, Iterable[DescriptorInput]]] = None
    ):
        self._collections: Dict[str, Tuple[CuratedDescriptor, ...]] = {}
        for slug, descriptors in (collections or {}).items():
            self.register_curated_imagery(slug, descriptors)

    @classmethod
    def with_default_collections(cls) -> "CuratedImageRepository":
        """Create a repository seeded with the built-in curated collections."""
        return cls(DEFAULT_CURATED_COLLECTIONS)

    def get(self, slug: str) -> Optional[Tuple[CuratedDescriptor, ...]]:
        return self._collections.get(slug)

    def register_curated_imagery(
        self, slug: str, descriptors: Iterable[DescriptorInput]
    ) -> None:
        """Register (or replace) the curated descriptors for a slug."""
        self._collections[slug] = tuple(
            d if isinstance(d, CuratedDescriptor) else CuratedDescriptor(**d)
            for d in descriptors
        )

    def register_images(self, location_slug: str, images: List[NormalizedImage]) -> None:
        """Promote an accepted image set into the curated table."""
        self.register_curated_imagery(
            location_slug, [to_curated_descriptor(image) for image in images]
        )

    def has_curated_imagery(self, name: str) -> bool:
        """Check whether a location name has at least one curated descriptor."""
        return bool(self._collections.get(location_slug(name)))

    def list_curated_slugs(self) -> List[str]:
        """List every slug with curated descriptors, in registration order."""
        return [slug for slug, descriptors in self._collections.items() if descriptors]

    def __len__(self) -> int:
        return len(self._collections)
