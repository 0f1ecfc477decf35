"""Closed set of catalog content types and their storage accessors."""

from enum import Enum


_COMMON_FIELDS = (
    "title",
    "nice_url",
    "original_title",
    "french_title",
    "alt_titles",
    "year",
    "synopsis",
    "image",
    "sources",
    "comment",
    "status",
    "complete",
    "average_rating",
    "review_count",
)

_FIELDS = {
    "anime": _COMMON_FIELDS
    + ("format", "episodes", "episode_duration", "studio", "director", "official_site"),
    "manga": _COMMON_FIELDS + ("author", "publisher", "volumes", "isbn", "tags"),
}


class ContentType(Enum):
    ANIME = "anime"
    MANGA = "manga"

    @property
    def table(self):
        return {"anime": "anime", "manga": "manga"}[self.value]

    @property
    def label(self):
        return {"anime": "Anime", "manga": "Manga"}[self.value]

    @property
    def fields(self):
        """Writable columns for this type."""
        return _FIELDS[self.value]

    @property
    def has_tag_column(self):
        # Only manga keeps a free-text comma-separated tag column
        return self is ContentType.MANGA

    @classmethod
    def parse(cls, value):
        """Return the member for a raw string, or None when unknown."""
        raw = (value or "").strip().lower()
        if raw == "mangas":
            raw = "manga"
        elif raw == "animes":
            raw = "anime"
        for member in cls:
            if member.value == raw:
                return member
        return None


# Admin activity can also target business records
LOG_TARGETS = {"anime", "manga", "business"}

# 0 refused, 1 published, 2 pending review
CONTENT_STATUSES = {0, 1, 2}

COLLECTION_STATUSES = {
    1: "completed",
    2: "in_progress",
    3: "planned",
    4: "dropped",
    5: "on_hold",
}
COLLECTION_STATUS_NAMES = {name: code for code, name in COLLECTION_STATUSES.items()}
COLLECTION_STATUS_NAMES.update({"watching": 2, "reading": 2, "paused": 5})
