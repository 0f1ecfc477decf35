"""Tag-affinity recommendation pipeline, independent of storage."""

from recommender.constants import DEFAULT_LIMIT
from recommender.scoring import score_candidates
from recommender.weights import extract_tag_weights, top_tags, user_top_tags


def empty_response(total_analyzed=0):
    return {"recommendations": [], "user_top_tags": [], "total_analyzed": total_analyzed}


def recommend(entries, collection_keys, load_candidates, limit=DEFAULT_LIMIT):
    """Build the recommendation payload for one user.

    entries: taste-defining CollectionEntry records (with tags).
    collection_keys: every (content_type, content_id) the user owns, any status.
    load_candidates: callable(top_tags, collection_keys) -> list of Candidate.
    """
    weights = extract_tag_weights(entries)
    if not weights:
        return empty_response(len(entries))

    top = top_tags(weights)
    candidates = load_candidates(top, collection_keys)
    items = score_candidates(
        candidates,
        weights,
        exclude=collection_keys,
        top=top,
        limit=limit,
    )
    return {
        "recommendations": [item.to_dict() for item in items],
        "user_top_tags": user_top_tags(weights),
        "total_analyzed": len(entries),
    }
