"""Project slug derivation."""

import re

SLUG_SEPARATOR = "-"
DEFAULT_SLUG_MAX_LENGTH = 30

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def make_project_slug(title: str, max_length: int = DEFAULT_SLUG_MAX_LENGTH) -> str:
    """Lowercase the title, collapse non-alphanumeric runs to ``-`` and truncate.

    Deterministic; two similar titles can map to the same slug.
    """
    return _NON_ALNUM.sub(SLUG_SEPARATOR, title.lower())[:max_length]
