"""Text helpers shared by the admin content services."""

import re
import unicodedata

ATTRIBUTION_RE = re.compile(r'<br><br>"Synopsis soumis par .+?"')


def slugify(text):
    """URL slug: lowercase, accents stripped, runs of other chars -> '-'."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text).lower())
    ascii_text = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_text)
    return slug.strip("-")


def strip_attribution(synopsis):
    return ATTRIBUTION_RE.sub("", synopsis or "")


def attribute_synopsis(synopsis, username):
    """Replace any previous submitter credit with one for ``username``."""
    clean = strip_attribution(synopsis)
    return f'{clean}<br><br>"Synopsis soumis par {username}"'


def normalize_format(value):
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() == "série":
        return "Série TV"
    return text
