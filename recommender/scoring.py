"""Scoring and ranking of catalog candidates against a tag-affinity map."""

import numpy as np
import pandas as pd
from sklearn.preprocessing import MultiLabelBinarizer

from recommender.constants import (
    AVERAGE_RATING_WEIGHT,
    DEFAULT_LIMIT,
    POPULARITY_WEIGHT,
    TAG_SCORE_WEIGHT,
)
from recommender.models import RecommendationItem
from recommender.weights import normalize_tag


def _distinct_tags(tags):
    seen = []
    for raw in tags or []:
        tag = normalize_tag(raw)
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _candidate_frame(candidates, weights, exclude, top):
    rows = []
    for idx, candidate in enumerate(candidates):
        if (candidate.content_type, candidate.content_id) in exclude:
            continue
        tags = _distinct_tags(candidate.tags)
        # Candidates must share at least one of the user's top tags
        if top is not None and not any(tag in top for tag in tags):
            continue
        matching = [tag for tag in tags if tag in weights]
        if not matching:
            continue
        rows.append(
            {
                "idx": idx,
                "content_type": candidate.content_type,
                "content_id": int(candidate.content_id),
                "average_rating": candidate.average_rating,
                "review_count": candidate.review_count,
                "matching_tags": matching,
            }
        )
    return pd.DataFrame(rows)


def score_frame(df, weights):
    """Add tag_score and score columns to a frame of matched candidates."""
    mlb = MultiLabelBinarizer(classes=list(weights.keys()))
    matrix = mlb.fit_transform(df["matching_tags"])
    weight_vector = np.array([weights[tag] for tag in mlb.classes_], dtype=float)

    df["tag_score"] = matrix @ weight_vector
    avg_rating = pd.to_numeric(df["average_rating"], errors="coerce").fillna(0.0)
    reviews = pd.to_numeric(df["review_count"], errors="coerce").fillna(0).clip(lower=0)
    df["score"] = (
        df["tag_score"] * TAG_SCORE_WEIGHT
        + avg_rating * AVERAGE_RATING_WEIGHT
        + np.log(reviews + 1) * POPULARITY_WEIGHT
    )
    return df


def score_candidates(candidates, weights, exclude=None, top=None, limit=DEFAULT_LIMIT):
    """Rank candidates by tag affinity, catalog rating and popularity.

    ``exclude`` holds (content_type, content_id) pairs already in the user's
    collection. ``top`` optionally restricts candidates to those carrying one
    of the given tags; scoring always uses the full ``weights`` map. Equal
    scores are ordered by content type then content id.
    """
    if not candidates or not weights:
        return []
    exclude = set(exclude or ())
    top = set(top) if top is not None else None

    df = _candidate_frame(candidates, weights, exclude, top)
    if df.empty:
        return []

    df = score_frame(df, weights)
    df = df.sort_values(
        by=["score", "content_type", "content_id"],
        ascending=[False, True, True],
        kind="mergesort",
    )

    results = []
    for row in df.head(limit).itertuples(index=False):
        candidate = candidates[row.idx]
        results.append(
            RecommendationItem(
                id=int(candidate.content_id),
                type=candidate.content_type,
                title=candidate.title,
                french_title=candidate.french_title or None,
                image=candidate.image or "",
                average_rating=float(candidate.average_rating or 0.0),
                review_count=int(candidate.review_count or 0),
                synopsis=candidate.synopsis or None,
                year=candidate.year,
                score=float(row.score),
                matching_tags=list(row.matching_tags),
            )
        )
    return results
