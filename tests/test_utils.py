import pytest

from app.content_types import ContentType
from utils.parsing import first_number, parse_float, parse_page
from utils.text import attribute_synopsis, normalize_format, slugify


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Shingeki no Kyojin", "shingeki-no-kyojin"),
        ("  L'Épée  du Roi! ", "l-epee-du-roi"),
        ("Ça--va", "ca-va"),
        ("", ""),
    ],
)
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_attribution_is_replaced_not_stacked():
    once = attribute_synopsis("Story", "alice")
    twice = attribute_synopsis(once, "bob")
    assert twice == 'Story<br><br>"Synopsis soumis par bob"'


def test_normalize_format():
    assert normalize_format("Série") == "Série TV"
    assert normalize_format(" Film ") == "Film"
    assert normalize_format(None) is None


def test_parse_page_clamps():
    assert parse_page(None, None) == (1, 20, 0)
    assert parse_page("3", "10") == (3, 10, 20)
    assert parse_page("0", "500") == (1, 100, 0)
    assert parse_page("x", "-5") == (1, 1, 0)


def test_parse_float_rejects_nan():
    assert parse_float("nan") is None
    assert parse_float("2.5") == 2.5


def test_first_number():
    assert first_number("26 épisodes") == 26
    assert first_number("unknown") is None


def test_content_type_parse():
    assert ContentType.parse("Anime") is ContentType.ANIME
    assert ContentType.parse("mangas") is ContentType.MANGA
    assert ContentType.parse("games") is None
    assert ContentType.parse(None) is None
    assert ContentType.MANGA.has_tag_column
    assert not ContentType.ANIME.has_tag_column
