"""Turn a rated collection into a tag-affinity map."""

from recommender.constants import (
    LOW_RATING_WEIGHT,
    RATING_WEIGHTS,
    TOP_TAG_LIMIT,
    UNRATED_WEIGHT,
    USER_TOP_TAGS_SHOWN,
)


def normalize_tag(value):
    """Lowercase and trim a tag; returns "" for blanks."""
    if value is None:
        return ""
    return str(value).strip().lower()


def split_tags(value):
    """Split a comma-separated tag column into normalized tags."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = str(value).split(",")
    tags = []
    for part in parts:
        tag = normalize_tag(part)
        if tag:
            tags.append(tag)
    return tags


def _coerce_rating(rating):
    if rating is None:
        return None
    if isinstance(rating, str):
        rating = rating.strip()
        if not rating:
            return None
    try:
        value = float(rating)
    except (TypeError, ValueError):
        return None
    if value != value:  # NaN from pandas
        return None
    return value


def rating_weight(rating):
    """Weight multiplier for one collection entry given its 0-5 rating."""
    value = _coerce_rating(rating)
    if value is None:
        return UNRATED_WEIGHT
    for threshold, weight in RATING_WEIGHTS:
        if value >= threshold:
            return weight
    return LOW_RATING_WEIGHT


def extract_tag_weights(entries):
    """Sum each entry's rating weight onto every tag it carries.

    Tags repeated on one entry (e.g. a genre that is also a business name)
    count once per occurrence. Insertion order is kept so that ties in
    later sorts stay deterministic.
    """
    weights = {}
    for entry in entries:
        if not entry.tags:
            continue
        weight = rating_weight(entry.rating)
        for raw in entry.tags:
            tag = normalize_tag(raw)
            if not tag:
                continue
            weights[tag] = weights.get(tag, 0.0) + weight
    return weights


def ranked_tags(weights):
    # sorted() is stable, so equal weights keep first-seen order
    return sorted(weights.items(), key=lambda item: item[1], reverse=True)


def top_tags(weights, limit=TOP_TAG_LIMIT):
    return [tag for tag, _ in ranked_tags(weights)[:limit]]


def user_top_tags(weights, limit=USER_TOP_TAGS_SHOWN):
    return [
        {"tag": tag, "weight": round(weight, 2)}
        for tag, weight in ranked_tags(weights)[:limit]
    ]
