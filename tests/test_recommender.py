import math

import pytest

from recommender.models import Candidate, CollectionEntry
from recommender.recommender import recommend
from recommender.scoring import score_candidates
from recommender.weights import (
    extract_tag_weights,
    rating_weight,
    split_tags,
    top_tags,
    user_top_tags,
)


def _entry(content_id, rating, tags, content_type="anime", status=1):
    return CollectionEntry(
        user_id=1,
        content_id=content_id,
        content_type=content_type,
        status=status,
        rating=rating,
        tags=tags,
    )


def _candidate(content_id, tags, content_type="anime", average=0.0, reviews=0):
    return Candidate(
        content_id=content_id,
        content_type=content_type,
        title=f"Title {content_id}",
        tags=tags,
        average_rating=average,
        review_count=reviews,
    )


@pytest.mark.parametrize(
    "rating, expected",
    [
        (None, 1.0),
        ("", 1.0),
        (5.0, 3.0),
        (4.5, 3.0),
        (4.0, 2.5),
        (3.5, 2.0),
        (3.0, 1.5),
        (2.5, 0.5),
        (0, 0.5),
    ],
)
def test_rating_weight_breakpoints(rating, expected):
    assert rating_weight(rating) == expected


def test_rating_weight_is_monotonic():
    ratings = [i / 2 for i in range(11)]
    weights = [rating_weight(r) for r in ratings]
    assert weights == sorted(weights)
    assert rating_weight(5.0) > rating_weight(3.0)


def test_split_tags_normalizes_and_drops_blanks():
    assert split_tags(" Action, ,Shounen ,") == ["action", "shounen"]
    assert split_tags(None) == []


def test_extract_tag_weights_sums_per_occurrence():
    entries = [
        _entry(1, 5.0, ["Action", "Shounen"]),
        _entry(2, None, ["action", "action"]),
        _entry(3, 4.0, []),
    ]
    weights = extract_tag_weights(entries)
    assert weights == {"action": 5.0, "shounen": 3.0}


def test_top_tags_keep_first_seen_order_on_ties():
    weights = {"b": 1.0, "a": 1.0, "c": 2.0}
    assert top_tags(weights) == ["c", "b", "a"]
    assert top_tags({f"t{i}": float(i) for i in range(30)}, limit=20)[0] == "t29"


def test_user_top_tags_rounds_and_truncates():
    weights = {f"t{i}": i + 0.333 for i in range(15)}
    shown = user_top_tags(weights)
    assert len(shown) == 10
    assert shown[0] == {"tag": "t14", "weight": 14.33}


def test_score_candidates_formula_and_exclusion():
    weights = {"action": 3.0, "shounen": 3.0}
    candidates = [
        _candidate(1, ["action"]),
        _candidate(99, ["Action", "shounen", "action"], average=4.0, reviews=9),
        _candidate(50, ["romance"]),
    ]
    results = score_candidates(candidates, weights, exclude={("anime", 1)}, top=["action", "shounen"])

    assert [item.id for item in results] == [99]
    item = results[0]
    assert item.matching_tags == ["action", "shounen"]
    expected = 6.0 * 10 + 4.0 * 2 + math.log(10) * 0.5
    assert item.score == pytest.approx(expected)


def test_score_candidates_exclusion_is_per_type():
    weights = {"action": 1.0}
    candidates = [_candidate(7, ["action"], content_type="manga")]
    results = score_candidates(candidates, weights, exclude={("anime", 7)})
    assert [(item.type, item.id) for item in results] == [("manga", 7)]


def test_score_ties_break_on_type_then_id():
    weights = {"action": 1.0}
    candidates = [
        _candidate(5, ["action"], content_type="manga"),
        _candidate(9, ["action"]),
        _candidate(2, ["action"]),
    ]
    results = score_candidates(candidates, weights)
    assert [(item.type, item.id) for item in results] == [("anime", 2), ("anime", 9), ("manga", 5)]


def test_score_candidates_respects_limit():
    weights = {"action": 1.0}
    candidates = [_candidate(i, ["action"], reviews=i) for i in range(1, 30)]
    results = score_candidates(candidates, weights, limit=5)
    assert [item.id for item in results] == [29, 28, 27, 26, 25]


def test_recommend_with_empty_collection_returns_empty_payload():
    calls = []

    def loader(top, keys):
        calls.append(top)
        return []

    payload = recommend([], set(), loader)
    assert payload == {"recommendations": [], "user_top_tags": [], "total_analyzed": 0}
    assert calls == []


def test_recommend_untagged_entries_report_raw_count():
    entries = [_entry(1, 5.0, []), _entry(2, None, [])]
    payload = recommend(entries, {("anime", 1), ("anime", 2)}, lambda top, keys: [])
    assert payload["recommendations"] == []
    assert payload["total_analyzed"] == 2


def test_recommend_end_to_end():
    entries = [_entry(1, 5.0, ["action", "shounen"])]
    keys = {("anime", 1)}
    seen = {}

    def loader(top, collection_keys):
        seen["top"] = top
        seen["keys"] = collection_keys
        return [_candidate(1, ["action"]), _candidate(99, ["action", "shounen"])]

    payload = recommend(entries, keys, loader, limit=10)
    assert seen["top"] == ["action", "shounen"]
    assert seen["keys"] == keys
    assert [item["id"] for item in payload["recommendations"]] == [99]
    assert payload["user_top_tags"] == [
        {"tag": "action", "weight": 3.0},
        {"tag": "shounen", "weight": 3.0},
    ]
    assert payload["total_analyzed"] == 1


def test_recommend_is_idempotent():
    entries = [_entry(1, 4.0, ["action"]), _entry(2, 3.0, ["drama", "action"])]
    candidates = [_candidate(i, ["action", "drama"], average=i / 10, reviews=i) for i in range(3, 12)]

    first = recommend(entries, {("anime", 1), ("anime", 2)}, lambda top, keys: candidates)
    second = recommend(entries, {("anime", 1), ("anime", 2)}, lambda top, keys: candidates)
    assert first == second


def test_higher_rating_pushes_its_tags_ahead():
    entries = [_entry(1, 5.0, ["mecha"]), _entry(2, 3.0, ["romance"])]
    candidates = [_candidate(10, ["romance"]), _candidate(11, ["mecha"])]
    payload = recommend(entries, {("anime", 1), ("anime", 2)}, lambda top, keys: candidates)
    assert [item["id"] for item in payload["recommendations"]] == [11, 10]
