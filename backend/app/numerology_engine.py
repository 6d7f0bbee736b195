"""Pythagorean numerology primitives: normalization, letter values, reduction, traces.

Pure functions only. No I/O, no logging, no mutable module state.
"""
from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from types import MappingProxyType

from .errors import InvalidDateFormatError, InvalidDateValueError


# ── Pythagorean letter-to-digit table ───────────────────────────────

# 1: A J S    4: D M V    7: G P Y
# 2: B K T    5: E N W    8: H Q Z
# 3: C L U    6: F O X    9: I R
LETTER_GROUPS: Mapping[int, str] = MappingProxyType({
    1: "AJS",
    2: "BKT",
    3: "CLU",
    4: "DMV",
    5: "ENW",
    6: "FOX",
    7: "GPY",
    8: "HQZ",
    9: "IR",
})

LETTER_VALUES: Mapping[str, int] = MappingProxyType({
    letter: value for value, letters in LETTER_GROUPS.items() for letter in letters
})

MASTER_NUMBERS: frozenset[int] = frozenset({11, 22, 33, 44})
KARMIC_NUMBERS: frozenset[int] = frozenset({13, 14, 16, 19})

VOWELS: frozenset[str] = frozenset("AEIOU")

Y_VOWEL = "vowel"
Y_CONSONANT = "consonant"

# Token-level Y exceptions, keyed by the normalized token. An entry forces
# every Y of that token into the given bucket; other tokens use the heuristic.
Y_TOKEN_OVERRIDES: Mapping[str, str] = MappingProxyType({
    "MYRIAM": Y_VOWEL,
    "SYLVAIN": Y_VOWEL,
    "YVES": Y_CONSONANT,
})

Y_RULE_DESCRIPTION = (
    "Token-level overrides first; otherwise Y is a vowel only when both "
    "neighbours inside the token are consonants, never at the start or end "
    "of the token; default consonant"
)

_DATE_RE = re.compile(r"^([0-9]{2})/([0-9]{2})/([0-9]{4})$")


# ── Input normalization ──────────────────────────────────────────────

def parse_birth_date(date_str: str | None) -> date:
    """Parse a strict ``DD/MM/YYYY`` string into a real calendar date."""
    match = _DATE_RE.match((date_str or "").strip())
    if match is None:
        raise InvalidDateFormatError(f"birth date must be DD/MM/YYYY, got {date_str!r}")

    day, month, year = (int(part) for part in match.groups())
    if not 1 <= day <= 31 or not 1 <= month <= 12 or year < 1000:
        raise InvalidDateValueError(f"birth date out of range: {date_str!r}")
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateValueError(f"birth date does not exist: {date_str!r}") from exc


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_token(raw: str | None) -> str:
    """Uppercase A-Z letters of ``raw`` with diacritics removed. May be empty."""
    upper = strip_accents(raw or "").upper()
    return "".join(ch for ch in upper if "A" <= ch <= "Z")


def split_name_field(raw: str | None) -> list[str]:
    """Split a name field on whitespace into normalized, non-empty tokens."""
    tokens = (normalize_token(piece) for piece in (raw or "").split())
    return [token for token in tokens if token]


# ── Letter values and classification ─────────────────────────────────

def letter_value(char: str) -> int:
    return LETTER_VALUES.get(char, 0)


def sum_letters(letters: Iterable[str]) -> int:
    return sum(letter_value(ch) for ch in letters)


def is_vowel_char(char: str) -> bool:
    return char in VOWELS


def is_consonant_char(char: str) -> bool:
    """Literal consonant test: A-Z, not a vowel and not Y."""
    return "A" <= char <= "Z" and char not in VOWELS and char != "Y"


def y_override_mode(token: str, overrides: Mapping[str, str] = Y_TOKEN_OVERRIDES) -> str | None:
    return overrides.get(token)


def is_y_vowel(token: str, index: int, overrides: Mapping[str, str] = Y_TOKEN_OVERRIDES) -> bool:
    """Whether the Y at ``token[index]`` counts as a vowel.

    Neighbours are checked with the literal consonant test, so a Y next to
    another Y always stays a consonant.
    """
    if token[index] != "Y":
        return False

    mode = y_override_mode(token, overrides)
    if mode == Y_VOWEL:
        return True
    if mode == Y_CONSONANT:
        return False

    if index == 0 or index == len(token) - 1:
        return False
    return is_consonant_char(token[index - 1]) and is_consonant_char(token[index + 1])


def extract_vowels(token: str, overrides: Mapping[str, str] = Y_TOKEN_OVERRIDES) -> list[str]:
    return [
        ch
        for i, ch in enumerate(token)
        if is_vowel_char(ch) or (ch == "Y" and is_y_vowel(token, i, overrides))
    ]


def extract_consonants(token: str, overrides: Mapping[str, str] = Y_TOKEN_OVERRIDES) -> list[str]:
    return [
        ch
        for i, ch in enumerate(token)
        if "A" <= ch <= "Z" and not is_vowel_char(ch) and not is_y_vowel(token, i, overrides)
    ]


# ── Reduction ─────────────────────────────────────────────────────────

def digit_sum(n: int) -> int:
    return sum(int(d) for d in str(n))


def reduce_number(n: int) -> int:
    """Sum decimal digits until below 10, stopping early on a master number."""
    while n >= 10 and n not in MASTER_NUMBERS:
        n = digit_sum(n)
    return n


def karmic_display(raw_total: int, reduced: int) -> str | None:
    """``"raw/reduced"`` when the pre-reduction total is karmic, else None."""
    if raw_total in KARMIC_NUMBERS:
        return f"{raw_total}/{reduced}"
    return None


# ── Calculation traces ────────────────────────────────────────────────

def reduction_steps(n: int) -> list[str]:
    """One ``"d1+d2 = next"`` line per step ``reduce_number`` takes from ``n``."""
    lines = []
    while n >= 10 and n not in MASTER_NUMBERS:
        digits = str(n)
        n = digit_sum(n)
        lines.append(f"{'+'.join(digits)} = {n}")
    return lines


def letters_trace(label: str, letters: Sequence[str], total: int) -> list[str]:
    """Audit lines for a total obtained by summing the values of ``letters``."""
    if not letters:
        return [f"{label}: no letters retained = 0"]
    values = "+".join(str(letter_value(ch)) for ch in letters)
    return [
        f"{label} = {''.join(letters)}",
        f"{values} = {total}",
        *reduction_steps(total),
    ]
