"""Unit tests for the numerology primitives."""
from datetime import date

import pytest

from app.errors import InvalidDateFormatError, InvalidDateValueError, NumerologyInputError
from app.numerology_engine import (
    KARMIC_NUMBERS,
    LETTER_VALUES,
    MASTER_NUMBERS,
    Y_TOKEN_OVERRIDES,
    extract_consonants,
    extract_vowels,
    is_y_vowel,
    karmic_display,
    letter_value,
    letters_trace,
    normalize_token,
    parse_birth_date,
    reduce_number,
    reduction_steps,
    split_name_field,
    sum_letters,
)


# ── parse_birth_date ─────────────────────────────────────────────────

def test_parse_valid_date():
    assert parse_birth_date("15/06/1990") == date(1990, 6, 15)


def test_parse_strips_whitespace():
    assert parse_birth_date("  01/01/2000 ") == date(2000, 1, 1)


def test_parse_leap_day_in_leap_year():
    assert parse_birth_date("29/02/2000") == date(2000, 2, 29)


@pytest.mark.parametrize("value", ["29/02/2001", "31/02/2001", "31/04/2020", "00/01/2000", "15/13/2000", "10/00/2000", "01/01/0999"])
def test_parse_rejects_impossible_dates(value):
    with pytest.raises(InvalidDateValueError):
        parse_birth_date(value)


@pytest.mark.parametrize("value", ["1/2/2000", "2000-01-01", "15-06-1990", "15/06/90", "", None, "aa/bb/cccc", "١٥/٠٦/١٩٩٠", "１５/０６/１９９０"])
def test_parse_rejects_bad_format(value):
    with pytest.raises(InvalidDateFormatError):
        parse_birth_date(value)


def test_date_errors_are_input_errors():
    with pytest.raises(NumerologyInputError) as exc_info:
        parse_birth_date("31/02/2001")
    assert exc_info.value.code == "INVALID_DATE_VALUE"
    assert isinstance(exc_info.value, ValueError)


# ── normalization ────────────────────────────────────────────────────

def test_normalize_strips_accents_and_uppercases():
    assert normalize_token("Éloïse") == "ELOISE"
    assert normalize_token("François") == "FRANCOIS"


def test_normalize_drops_non_letters():
    assert normalize_token("D'Artagnan") == "DARTAGNAN"
    assert normalize_token("Jean-Pierre") == "JEANPIERRE"
    assert normalize_token("123") == ""
    assert normalize_token(None) == ""


def test_split_name_field_drops_empty_tokens():
    assert split_name_field("  Marie   Anne-Sophie  42 ") == ["MARIE", "ANNESOPHIE"]
    assert split_name_field("") == []
    assert split_name_field(None) == []


# ── letter values ────────────────────────────────────────────────────

def test_letter_table_covers_alphabet():
    assert sorted(LETTER_VALUES) == [chr(c) for c in range(ord("A"), ord("Z") + 1)]
    assert set(LETTER_VALUES.values()) == set(range(1, 10))


def test_letter_table_is_read_only():
    with pytest.raises(TypeError):
        LETTER_VALUES["A"] = 9  # type: ignore[index]


@pytest.mark.parametrize(
    "letters,value",
    [("AJS", 1), ("BKT", 2), ("CLU", 3), ("DMV", 4), ("ENW", 5), ("FOX", 6), ("GPY", 7), ("HQZ", 8), ("IR", 9)],
)
def test_letter_groups(letters, value):
    for ch in letters:
        assert letter_value(ch) == value


def test_sum_letters():
    # J=1,E=5,A=1,N=5,D=4,U=3,P=7,O=6,N=5,T=2
    assert sum_letters("JEANDUPONT") == 39


# ── Y classification ─────────────────────────────────────────────────

def test_y_between_vowels_is_consonant():
    assert extract_vowels("MAYA") == ["A", "A"]
    assert extract_consonants("MAYA") == ["M", "Y"]


def test_y_between_consonants_is_vowel():
    assert extract_vowels("LYS") == ["Y"]
    assert extract_consonants("LYS") == ["L", "S"]


def test_y_at_edges_is_consonant():
    assert not is_y_vowel("YANN", 0)
    assert not is_y_vowel("ANDY", 3)
    assert "Y" in extract_consonants("ANDY")


def test_y_next_to_y_stays_consonant():
    assert extract_vowels("LYYS") == []
    assert extract_consonants("LYYS") == ["L", "Y", "Y", "S"]


def test_override_forces_mode():
    overrides = {"MAYA": "vowel", "LYS": "consonant"}
    assert extract_vowels("MAYA", overrides) == ["A", "Y", "A"]
    assert extract_consonants("LYS", overrides) == ["L", "Y", "S"]


def test_default_overrides_are_read_only():
    with pytest.raises(TypeError):
        Y_TOKEN_OVERRIDES["MAYA"] = "vowel"  # type: ignore[index]


def test_every_letter_lands_in_one_bucket():
    for token in ("SYLVAIN", "MYRIAM", "GUY", "KYLIAN", "LYYS", "AE"):
        vowels = extract_vowels(token)
        consonants = extract_consonants(token)
        assert len(vowels) + len(consonants) == len(token)


def test_classifier_handles_empty_token():
    assert extract_vowels("") == []
    assert extract_consonants("") == []


# ── reduce_number ────────────────────────────────────────────────────

def test_reduce_single_digit_unchanged():
    for n in range(0, 10):
        assert reduce_number(n) == n


def test_reduce_master_numbers_preserved():
    assert reduce_number(11) == 11
    assert reduce_number(22) == 22
    assert reduce_number(33) == 33
    assert reduce_number(44) == 44


def test_reduce_two_digit():
    assert reduce_number(14) == 5   # 1+4
    assert reduce_number(18) == 9   # 1+8
    assert reduce_number(20) == 2   # 2+0


def test_reduce_finds_master_on_the_way():
    assert reduce_number(29) == 11    # 2+9
    assert reduce_number(2009) == 11  # 2+0+0+9
    assert reduce_number(1993) == 22  # 1+9+9+3


def test_reduce_multi_step():
    assert reduce_number(99) == 9      # 9+9=18 → 1+8=9
    assert reduce_number(2011) == 4


def test_reduce_converges_and_is_idempotent():
    for n in range(0, 20000):
        reduced = reduce_number(n)
        assert reduced < 10 or reduced in MASTER_NUMBERS
        assert reduce_number(reduced) == reduced


# ── karmic_display ───────────────────────────────────────────────────

def test_karmic_display_uses_raw_total():
    assert karmic_display(13, 4) == "13/4"
    assert karmic_display(19, 1) == "19/1"


def test_karmic_display_absent_for_other_totals():
    for total in range(0, 100):
        if total not in KARMIC_NUMBERS:
            assert karmic_display(total, reduce_number(total)) is None


# ── traces ───────────────────────────────────────────────────────────

def test_reduction_steps():
    assert reduction_steps(7) == []
    assert reduction_steps(22) == []
    assert reduction_steps(39) == ["3+9 = 12", "1+2 = 3"]
    assert reduction_steps(2011) == ["2+0+1+1 = 4"]


def test_letters_trace():
    assert letters_trace("NAME", "JEANDUPONT", 39) == [
        "NAME = JEANDUPONT",
        "1+5+1+5+4+3+7+6+5+2 = 39",
        "3+9 = 12",
        "1+2 = 3",
    ]


def test_letters_trace_stops_at_master():
    # L=3,Y=7,S=1 → 11
    assert letters_trace("NAME", "LYS", 11) == ["NAME = LYS", "3+7+1 = 11"]


def test_letters_trace_empty():
    assert letters_trace("CONSONANTS", [], 0) == ["CONSONANTS: no letters retained = 0"]
