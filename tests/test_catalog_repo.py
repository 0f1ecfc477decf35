from app.db import unicode_lower
from app.repos.catalog import _escape_like, _top_tag_clause


def test_like_wildcards_in_tags_are_escaped():
    assert _escape_like("100%_sure\\") == "100\\%\\_sure\\\\"

    clause, params = _top_tag_clause(["100%", "slice_of_life"], with_tag_column=True)
    assert "ESCAPE" in clause
    assert params == ["100%", "slice_of_life", "%100\\%%", "%slice\\_of\\_life%"]


def test_business_only_clause_has_no_like():
    clause, params = _top_tag_clause(["école"], with_tag_column=False)
    assert "LIKE" not in clause
    assert params == ["école"]


def test_unicode_lower_folds_accented_capitals():
    assert unicode_lower("ÉCOLE") == "école"
    assert unicode_lower(None) is None
