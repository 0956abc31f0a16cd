"""City-name normalization for matching free-form city identifiers.

The same transform runs in Python (request values) and in SQL (stored
destination cities), both built from ``ACCENTED_CHARS``/``PLAIN_CHARS``:

1. keep the text before the first comma ("Bogotá, D.C." -> "Bogotá");
2. transliterate accented vowels and ñ, preserving case;
3. drop everything that is not an ASCII letter;
4. lower-case.
"""

from typing import Any

from sqlalchemy import ColumnElement, func

ACCENTED_CHARS = (
    "áàâãäéèêëíìîïóòôõöúùûü"
    "ÁÀÂÃÄÉÈÊËÍÌÎÏÓÒÔÕÖÚÙÛÜ"
    "ñÑ"
)
PLAIN_CHARS = (
    "aaaaaeeeeiiiiooooouuuu"
    "AAAAAEEEEIIIIOOOOOUUUU"
    "nN"
)

_TRANSLITERATION = str.maketrans(ACCENTED_CHARS, PLAIN_CHARS)


def normalize_city_name(value: str) -> str:
    """Return the canonical matching key for a city name.

    Args:
        value: Free-form city text, e.g. ``"São Paulo"`` or ``"Sao Paulo, SP"``.

    Returns:
        Lower-case ASCII letters only; ``""`` if nothing survives.
    """
    head = value.split(",", 1)[0]
    plain = head.translate(_TRANSLITERATION)
    letters = "".join(ch for ch in plain if ("a" <= ch <= "z") or ("A" <= ch <= "Z"))
    return letters.lower()


def city_key_expression(column: ColumnElement[Any]) -> ColumnElement[str]:
    """Render ``normalize_city_name`` as a PostgreSQL expression.

    Args:
        column: Stored city column (e.g. ``Destination.city``).

    Returns:
        SQL expression evaluating to the column's matching key.
    """
    head = func.split_part(column, ",", 1)
    plain = func.translate(head, ACCENTED_CHARS, PLAIN_CHARS)
    letters = func.regexp_replace(plain, "[^a-zA-Z]", "", "g")
    return func.lower(letters)
