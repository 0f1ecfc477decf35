"""Record types passed between the collection reader, scorer and API layer."""

from dataclasses import asdict, dataclass, field
from typing import List, Optional


@dataclass
class CollectionEntry:
    user_id: int
    content_id: int
    content_type: str
    status: int
    rating: Optional[float] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class Candidate:
    content_id: int
    content_type: str
    title: str
    tags: List[str] = field(default_factory=list)
    french_title: Optional[str] = None
    image: Optional[str] = None
    average_rating: float = 0.0
    review_count: int = 0
    synopsis: Optional[str] = None
    year: Optional[int] = None


@dataclass
class RecommendationItem:
    id: int
    type: str
    title: str
    french_title: Optional[str]
    image: str
    average_rating: float
    review_count: int
    synopsis: Optional[str]
    year: Optional[int]
    score: float
    matching_tags: List[str]

    def to_dict(self):
        return asdict(self)
