"""Full numerology theme: every figure of a birth record plus its calculation lines.

Each figure is a frozen record holding its numbers and the trace built from
the very same local values, so the audit lines can never disagree with the
result.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .errors import InvalidTargetYearError, MissingRequiredFieldsError
from .numerology_engine import (
    Y_RULE_DESCRIPTION,
    Y_TOKEN_OVERRIDES,
    digit_sum,
    extract_consonants,
    extract_vowels,
    karmic_display,
    letter_value,
    letters_trace,
    parse_birth_date,
    reduce_number,
    reduction_steps,
    split_name_field,
    sum_letters,
    y_override_mode,
)
from .numerology_recap import RecapAges, get_recap_ages


FIGURE_NAMES: tuple[str, ...] = (
    "life_path",
    "expression",
    "resource",
    "active",
    "hereditary",
    "inner_self",
    "inner_self_challenge",
    "realization",
    "spiritual_drive",
    "spiritual_drive_challenge",
    "expression_challenge",
    "balance",
    "marital_name",
    "life_settings",
    "life_acts",
    "soul_lesson",
    "challenges",
    "personal_year",
    "key_year",
)


@dataclass(frozen=True)
class BirthRecord:
    first_name: str | None
    family_name: str | None
    birth_date: str | None
    middle_names: str | None = None
    marital_name: str | None = None


# ── Figures ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Figure:
    total: int
    reduced: int
    karmic: str | None = None
    trace: tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "reduced": self.reduced, "karmic": self.karmic}


@dataclass(frozen=True)
class ConsonantFigure(Figure):
    missing_consonants: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "missing_consonants": self.missing_consonants}


@dataclass(frozen=True)
class ConsonantChallenge(ConsonantFigure):
    first: str | None = None
    last: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "first": self.first, "last": self.last}


@dataclass(frozen=True)
class Balance(Figure):
    letters: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "letters": list(self.letters)}


@dataclass(frozen=True)
class PersonalYear(Figure):
    target_year: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "target_year": self.target_year}


@dataclass(frozen=True)
class LifeSettings:
    """Formative, productive and harvest cycles with the recap start ages."""

    formative_cycle: int
    productive_cycle: int
    year_digits_sum: int
    year_reduced: int
    harvest_cycle: Figure
    ages: RecapAges
    trace: tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "formative_cycle": self.formative_cycle,
            "productive_cycle": self.productive_cycle,
            "year_digits_sum": self.year_digits_sum,
            "year_reduced": self.year_reduced,
            "harvest_cycle": {"total": self.harvest_cycle.total, "reduced": self.harvest_cycle.reduced},
            "ages": {
                "recap_key": self.ages.key,
                "cycle2_start": self.ages.cycle2,
                "cycle3_start": self.ages.cycle3,
            },
        }


@dataclass(frozen=True)
class LifeActs:
    """The four acts. ``actN_total`` are the sums before reduction."""

    act1: int
    act2: int
    act3: int
    act4: int
    act1_total: int
    act2_total: int
    act3_total: int
    act4_total: int
    ages: RecapAges
    trace: tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "act1": self.act1,
            "act2": self.act2,
            "act3": self.act3,
            "act4": self.act4,
            "raw": {
                "act1": self.act1_total,
                "act2": self.act2_total,
                "act3": self.act3_total,
                "act4": self.act4_total,
            },
            "ages": {
                "recap_key": self.ages.key,
                "act2_start": self.ages.act2,
                "act3_start": self.ages.act3,
                "act4_start": self.ages.act4,
            },
        }


@dataclass(frozen=True)
class Challenges:
    challenge1: int
    challenge2: int
    major: int
    challenge1_total: int
    challenge2_total: int
    major_total: int
    trace: tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "challenge1": self.challenge1,
            "challenge2": self.challenge2,
            "major": self.major,
            "raw": {
                "challenge1": self.challenge1_total,
                "challenge2": self.challenge2_total,
                "major": self.major_total,
            },
        }


@dataclass(frozen=True)
class KeyYear:
    year: int
    trace: tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {"year": self.year}


# ── Audit metadata ───────────────────────────────────────────────────

@dataclass(frozen=True)
class YOverride:
    token: str
    mode: str

    def to_dict(self) -> dict[str, str]:
        return {"token": self.token, "mode": self.mode}


@dataclass(frozen=True)
class TokenBreakdown:
    token: str
    letters: tuple[str, ...]
    sum_all: int
    vowels: tuple[str, ...]
    sum_vowels: int
    consonants: tuple[str, ...]
    sum_consonants: int
    y_override: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "letters": list(self.letters),
            "sum_all": self.sum_all,
            "vowels": list(self.vowels),
            "sum_vowels": self.sum_vowels,
            "consonants": list(self.consonants),
            "sum_consonants": self.sum_consonants,
            "y_override": self.y_override,
        }


# ── Result ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NumerologyResult:
    record: BirthRecord
    birth_date: date
    target_year: int

    life_path: Figure
    expression: Figure
    resource: Figure
    active: Figure
    hereditary: Figure
    inner_self: ConsonantFigure
    inner_self_challenge: ConsonantChallenge
    realization: Figure
    spiritual_drive: Figure
    spiritual_drive_challenge: ConsonantFigure
    expression_challenge: Figure
    balance: Balance
    marital_name: Figure | None
    life_settings: LifeSettings
    life_acts: LifeActs
    soul_lesson: Figure
    challenges: Challenges
    personal_year: PersonalYear
    key_year: KeyYear

    overrides_applied: tuple[YOverride, ...] = ()
    debug_tokens: tuple[TokenBreakdown, ...] | None = None

    @property
    def calc_lines(self) -> dict[str, list[str]]:
        lines: dict[str, list[str]] = {}
        for name in FIGURE_NAMES:
            figure = getattr(self, name)
            lines[name] = list(figure.trace) if figure is not None else []
        return lines

    def to_dict(self) -> dict[str, Any]:
        computed: dict[str, Any] = {}
        for name in FIGURE_NAMES:
            figure = getattr(self, name)
            computed[name] = figure.to_dict() if figure is not None else None

        data: dict[str, Any] = {
            "inputs": {
                "first_name": self.record.first_name,
                "middle_names": self.record.middle_names or "",
                "family_name": self.record.family_name,
                "marital_name": self.record.marital_name or "",
                "birth_date": self.record.birth_date,
                "target_year": self.target_year,
            },
            "computed": computed,
            "calc_lines": self.calc_lines,
            "y_rule": {
                "rule": Y_RULE_DESCRIPTION,
                "overrides_applied": [item.to_dict() for item in self.overrides_applied],
            },
        }
        if self.debug_tokens is not None:
            data["debug"] = {"birth_tokens": [item.to_dict() for item in self.debug_tokens]}
        return data


# ── Calculation ──────────────────────────────────────────────────────

def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _letters_figure(label: str, letters: Sequence[str]) -> Figure:
    total = sum_letters(letters)
    reduced = reduce_number(total)
    return Figure(
        total=total,
        reduced=reduced,
        karmic=karmic_display(total, reduced),
        trace=tuple(letters_trace(label, letters, total)),
    )


def _sum_figure(lines: Sequence[str], total: int) -> Figure:
    return Figure(total=total, reduced=reduce_number(total), trace=(*lines, *reduction_steps(total)))


def _token_breakdown(token: str, overrides: Mapping[str, str]) -> TokenBreakdown:
    vowels = extract_vowels(token, overrides)
    consonants = extract_consonants(token, overrides)
    return TokenBreakdown(
        token=token,
        letters=tuple(token),
        sum_all=sum_letters(token),
        vowels=tuple(vowels),
        sum_vowels=sum_letters(vowels),
        consonants=tuple(consonants),
        sum_consonants=sum_letters(consonants),
        y_override=y_override_mode(token, overrides),
    )


def compute_numerology(
    record: BirthRecord,
    target_year: int | None = None,
    include_debug: bool = False,
    y_overrides: Mapping[str, str] = Y_TOKEN_OVERRIDES,
) -> NumerologyResult:
    """Compute the complete theme of ``record``.

    ``target_year`` drives the personal year; when it is missing or zero the
    current calendar year is used. Raises a ``NumerologyError`` subclass on bad input; no
    partial result is ever returned.
    """
    missing = [
        name
        for name, value in (
            ("first_name", record.first_name),
            ("family_name", record.family_name),
            ("birth_date", record.birth_date),
        )
        if _is_blank(value)
    ]
    if missing:
        raise MissingRequiredFieldsError(f"missing required fields: {', '.join(missing)}")

    birth = parse_birth_date(record.birth_date)
    day, month, year = birth.day, birth.month, birth.year
    if not target_year:
        target_year = date.today().year
    elif target_year < 0:
        raise InvalidTargetYearError(f"target year must be positive, got {target_year}")

    first_tokens = split_name_field(record.first_name)
    middle_tokens = split_name_field(record.middle_names)
    family_tokens = split_name_field(record.family_name)
    marital_tokens = split_name_field(record.marital_name)
    birth_tokens = [*first_tokens, *middle_tokens, *family_tokens]
    civil_tokens = [*birth_tokens, *marital_tokens]

    # Life path: DD + MM + YYYY, not the digits of DDMMYYYY
    life_path_total = day + month + year
    life_path = _sum_figure(
        [
            f"DD = {day:02d}",
            f"MM = {month:02d}",
            f"YYYY = {year}",
            f"{day}+{month}+{year} = {life_path_total}",
        ],
        life_path_total,
    )
    ages = get_recap_ages(life_path.reduced)

    expression = _letters_figure("FULL BIRTH NAME", "".join(birth_tokens))

    resource_total = life_path.reduced + expression.reduced
    resource = _sum_figure(
        [
            f"Life Path (reduced) = {life_path.reduced}",
            f"Expression (reduced) = {expression.reduced}",
            f"{life_path.reduced}+{expression.reduced} = {resource_total}",
        ],
        resource_total,
    )

    active = _letters_figure("FIRST NAME", "".join(first_tokens))
    hereditary = _letters_figure("BIRTH FAMILY NAME", "".join(family_tokens))

    consonants = [ch for token in birth_tokens for ch in extract_consonants(token, y_overrides)]
    missing_consonants = not consonants
    inner_self_total = sum_letters(consonants)
    inner_self_reduced = reduce_number(inner_self_total)
    inner_self = ConsonantFigure(
        total=inner_self_total,
        reduced=inner_self_reduced,
        karmic=karmic_display(inner_self_total, inner_self_reduced),
        trace=tuple(letters_trace("CONSONANTS (INNER SELF)", consonants, inner_self_total)),
        missing_consonants=missing_consonants,
    )

    first_consonant = consonants[0] if consonants else None
    last_consonant = consonants[-1] if consonants else None
    first_value = letter_value(first_consonant) if first_consonant else 0
    last_value = letter_value(last_consonant) if last_consonant else 0
    challenge_total = abs(first_value - last_value)
    inner_self_challenge = ConsonantChallenge(
        total=challenge_total,
        reduced=reduce_number(challenge_total),
        trace=(
            f"First consonant = {first_consonant or '-'} ({first_value})",
            f"Last consonant = {last_consonant or '-'} ({last_value})",
            f"|{first_value}-{last_value}| = {challenge_total}",
            *reduction_steps(challenge_total),
        ),
        missing_consonants=missing_consonants,
        first=first_consonant,
        last=last_consonant,
    )

    day_reduced = reduce_number(day)
    month_reduced = reduce_number(month)
    realization_total = day_reduced + month_reduced
    realization = _sum_figure(
        [
            f"Day (reduced) = {day_reduced}",
            f"Month (reduced) = {month_reduced}",
            f"{day_reduced}+{month_reduced} = {realization_total}",
        ],
        realization_total,
    )

    vowels = [ch for token in birth_tokens for ch in extract_vowels(token, y_overrides)]
    spiritual_drive = _letters_figure("VOWELS (SPIRITUAL DRIVE)", vowels)

    spiritual_drive_challenge = ConsonantFigure(
        total=challenge_total,
        reduced=inner_self_challenge.reduced,
        trace=(
            f"Same formula as Inner-Self Challenge = {challenge_total}",
            *reduction_steps(challenge_total),
        ),
        missing_consonants=missing_consonants,
    )

    expression_challenge_total = spiritual_drive.reduced + spiritual_drive_challenge.reduced
    expression_challenge = _sum_figure(
        [
            f"Spiritual Drive (reduced) = {spiritual_drive.reduced}",
            f"Spiritual-Drive Challenge (reduced) = {spiritual_drive_challenge.reduced}",
            f"{spiritual_drive.reduced}+{spiritual_drive_challenge.reduced} = {expression_challenge_total}",
        ],
        expression_challenge_total,
    )

    balance_letters = [token[0] for token in civil_tokens]
    balance_total = sum_letters(balance_letters)
    balance = Balance(
        total=balance_total,
        reduced=reduce_number(balance_total),
        trace=tuple(letters_trace("REFERENCE (FIRST LETTERS)", balance_letters, balance_total)),
        letters=tuple(balance_letters),
    )

    marital_name = None
    if marital_tokens:
        marital_name = _letters_figure("MARITAL NAME", "".join(marital_tokens))

    year_digits_sum = digit_sum(year)
    year_reduced = reduce_number(year_digits_sum)
    formative_cycle = month_reduced
    productive_cycle = day_reduced
    life_settings = LifeSettings(
        formative_cycle=formative_cycle,
        productive_cycle=productive_cycle,
        year_digits_sum=year_digits_sum,
        year_reduced=year_reduced,
        harvest_cycle=Figure(total=year_digits_sum, reduced=year_reduced),
        ages=ages,
        trace=(
            f"Formative Cycle (month) = {month} → {formative_cycle}",
            f"Productive Cycle (day) = {day} → {productive_cycle}",
            f"Year digit sum = {'+'.join(str(year))} = {year_digits_sum}",
            *reduction_steps(year_digits_sum),
            f"Harvest Cycle = {year_digits_sum} → {year_reduced}",
            f"Second cycle starts (recap table) = {ages.cycle2} years",
            f"Third cycle starts (recap table) = {ages.cycle3} years",
        ),
    )

    # Act 3 adds the unreduced sums of acts 1 and 2
    act1_total = day + month
    act2_total = day + year
    act3_total = act1_total + act2_total
    act4_total = month + year
    act1 = reduce_number(act1_total)
    act2 = reduce_number(act2_total)
    act3 = reduce_number(act3_total)
    act4 = reduce_number(act4_total)
    life_acts = LifeActs(
        act1=act1,
        act2=act2,
        act3=act3,
        act4=act4,
        act1_total=act1_total,
        act2_total=act2_total,
        act3_total=act3_total,
        act4_total=act4_total,
        ages=ages,
        trace=(
            f"Act 1 = {day}+{month} = {act1_total} → {act1}",
            f"Act 2 = {day}+{year} = {act2_total} → {act2}",
            f"Act 3 = {act1_total}+{act2_total} = {act3_total} → {act3}",
            f"Act 4 = {month}+{year} = {act4_total} → {act4}",
            f"Act 2 starts (recap table) = {ages.act2} years",
            f"Act 3 starts (recap table) = {ages.act3} years",
            f"Act 4 starts (recap table) = {ages.act4} years",
        ),
    )

    soul_lesson_total = act1 + act2 + act3 + act4
    soul_lesson = _sum_figure([f"{act1}+{act2}+{act3}+{act4} = {soul_lesson_total}"], soul_lesson_total)

    challenge1_total = abs(day_reduced - month_reduced)
    challenge1 = reduce_number(challenge1_total)
    challenge2_total = abs(day_reduced - year_reduced)
    challenge2 = reduce_number(challenge2_total)
    major_total = abs(challenge1 - challenge2)
    major = reduce_number(major_total)
    challenges = Challenges(
        challenge1=challenge1,
        challenge2=challenge2,
        major=major,
        challenge1_total=challenge1_total,
        challenge2_total=challenge2_total,
        major_total=major_total,
        trace=(
            f"Year digit sum = {year_digits_sum}",
            f"Year (reduced) = {year_reduced}",
            f"First challenge = |{day_reduced}-{month_reduced}| = {challenge1_total} → {challenge1}",
            f"Second challenge = |{day_reduced}-{year_reduced}| = {challenge2_total} → {challenge2}",
            f"Major challenge = |{challenge1}-{challenge2}| = {major_total} → {major}",
        ),
    )

    target_digits_sum = digit_sum(target_year)
    target_reduced = reduce_number(target_digits_sum)
    personal_year_total = day_reduced + month_reduced + target_reduced
    personal_year_reduced = reduce_number(personal_year_total)
    personal_year = PersonalYear(
        total=personal_year_total,
        reduced=personal_year_reduced,
        trace=(
            f"Target year = {target_year}",
            f"Target year digit sum = {'+'.join(str(target_year))} = {target_digits_sum}",
            f"Target year (reduced) = {target_reduced}",
            f"Day (reduced) = {day_reduced}",
            f"Month (reduced) = {month_reduced}",
            f"{day_reduced}+{month_reduced}+{target_reduced} = {personal_year_total} → {personal_year_reduced}",
        ),
        target_year=target_year,
    )

    # Key year stays unreduced
    key_year_value = day + month + year
    key_year = KeyYear(
        year=key_year_value,
        trace=(
            f"Day+Month = {day}+{month} = {day + month}",
            f"(Day+Month)+Birth year = {day + month}+{year} = {key_year_value}",
        ),
    )

    overrides_applied = tuple(
        YOverride(token=token, mode=mode)
        for token in civil_tokens
        if "Y" in token and (mode := y_override_mode(token, y_overrides)) is not None
    )

    debug_tokens = None
    if include_debug:
        debug_tokens = tuple(_token_breakdown(token, y_overrides) for token in birth_tokens)

    return NumerologyResult(
        record=record,
        birth_date=birth,
        target_year=target_year,
        life_path=life_path,
        expression=expression,
        resource=resource,
        active=active,
        hereditary=hereditary,
        inner_self=inner_self,
        inner_self_challenge=inner_self_challenge,
        realization=realization,
        spiritual_drive=spiritual_drive,
        spiritual_drive_challenge=spiritual_drive_challenge,
        expression_challenge=expression_challenge,
        balance=balance,
        marital_name=marital_name,
        life_settings=life_settings,
        life_acts=life_acts,
        soul_lesson=soul_lesson,
        challenges=challenges,
        personal_year=personal_year,
        key_year=key_year,
        overrides_applied=overrides_applied,
        debug_tokens=debug_tokens,
    )
