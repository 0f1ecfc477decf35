"""Per-user recommendations: collection reading, candidate loading, caching."""

import logging

from app.content_types import ContentType
from app.repos import catalog as catalog_repo
from app.repos import collections as collections_repo
from recommender.constants import DEFAULT_LIMIT, TASTE_STATUSES
from recommender.models import Candidate, CollectionEntry
from recommender.recommender import recommend
from recommender.weights import normalize_tag, split_tags

logger = logging.getLogger(__name__)

CACHE_PREFIX = "recommendations"


def cache_key(user_id, media_type, limit):
    kind = media_type.value if media_type else "all"
    return f"{CACHE_PREFIX}:{user_id}:{kind}:{limit}"


def _types_for(media_type):
    return [media_type] if media_type else list(ContentType)


def _row_tags(tag_column, names):
    # Free-text tags first, then business names; duplicates are kept
    tags = split_tags(tag_column)
    tags.extend(tag for tag in (normalize_tag(name) for name in names) if tag)
    return tags


def load_taste_entries(user_id, media_type=None):
    """Completed and in-progress entries of the user, with their tags."""
    types = _types_for(media_type)
    rows = catalog_repo.taste_rows(user_id, [t.value for t in types], list(TASTE_STATUSES))

    names = {}
    for content_type in types:
        ids = [row["content_id"] for row in rows if row["content_type"] == content_type.value]
        names[content_type.value] = catalog_repo.business_names(content_type.value, ids)

    entries = []
    for row in rows:
        linked = names[row["content_type"]].get(int(row["content_id"]), [])
        entries.append(
            CollectionEntry(
                user_id=row["user_id"],
                content_id=int(row["content_id"]),
                content_type=row["content_type"],
                status=int(row["status"]),
                rating=row["rating"],
                tags=_row_tags(row["tags"], linked),
            )
        )
    return entries


def candidate_loader(user_id, media_type=None):
    """Build the callable the pipeline uses to fetch catalog candidates."""
    types = _types_for(media_type)

    def load(top_tags, _collection_keys):
        candidates = []
        for content_type in types:
            rows = catalog_repo.candidate_rows(content_type, user_id, top_tags)
            names = catalog_repo.business_names(content_type.value, [row["id"] for row in rows])
            for row in rows:
                candidates.append(
                    Candidate(
                        content_id=int(row["id"]),
                        content_type=content_type.value,
                        title=row["title"],
                        tags=_row_tags(row["tags"], names.get(int(row["id"]), [])),
                        french_title=row["french_title"],
                        image=row["image"],
                        average_rating=row["average_rating"] or 0.0,
                        review_count=row["review_count"] or 0,
                        synopsis=row["synopsis"],
                        year=row["year"],
                    )
                )
        logger.debug("Loaded %d candidates for user %s", len(candidates), user_id)
        return candidates

    return load


def get_recommendations_for_user(cache, user_id, limit=DEFAULT_LIMIT, media_type=None):
    """Cached recommendation payload for a user and media filter.

    Cached entries are returned as stored until they expire or the caller
    invalidates them; nothing here watches the collection for changes.
    """
    key = cache_key(user_id, media_type, limit)
    cached = cache.get(key)
    if cached is not None:
        return cached

    entries = load_taste_entries(user_id, media_type)
    collection_keys = collections_repo.list_keys(user_id)
    result = recommend(entries, collection_keys, candidate_loader(user_id, media_type), limit=limit)

    if not result["user_top_tags"]:
        # Nothing to learn from yet; skip caching so the first rating shows up
        return result

    cache.set(key, result)
    logger.info(
        "Computed %d recommendations for user %s (%s)",
        len(result["recommendations"]),
        user_id,
        key,
    )
    return result


def invalidate_user_recommendations(cache, user_id):
    """Drop every cached recommendation list for a user. Never raises."""
    try:
        return cache.delete_pattern(f"{CACHE_PREFIX}:{user_id}:*")
    except Exception:
        logger.exception("Failed to invalidate recommendations cache for user %s", user_id)
        return 0
