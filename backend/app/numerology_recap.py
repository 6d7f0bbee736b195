"""Static recap table: ages at which life acts and cycles begin, per life path."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .errors import RecapLookupFailedError, UnsupportedLifePathError


# Copied as-is from the recap table; nothing here is computed.
ACTS_START_AGES: Mapping[str, Mapping[str, int]] = MappingProxyType({
    "1": MappingProxyType({"act2": 35, "act3": 44, "act4": 53}),
    "2/11": MappingProxyType({"act2": 34, "act3": 43, "act4": 52}),
    "3": MappingProxyType({"act2": 33, "act3": 42, "act4": 51}),
    "4/22": MappingProxyType({"act2": 32, "act3": 41, "act4": 50}),
    "5": MappingProxyType({"act2": 31, "act3": 40, "act4": 49}),
    "6/33": MappingProxyType({"act2": 30, "act3": 39, "act4": 48}),
    "7": MappingProxyType({"act2": 29, "act3": 38, "act4": 47}),
    "8/44": MappingProxyType({"act2": 28, "act3": 37, "act4": 46}),
    "9": MappingProxyType({"act2": 27, "act3": 36, "act4": 45}),
})

CYCLES_START_AGES: Mapping[str, Mapping[str, int]] = MappingProxyType({
    "1": MappingProxyType({"cycle2": 27, "cycle3": 54}),
    "2/11": MappingProxyType({"cycle2": 26, "cycle3": 53}),
    "3": MappingProxyType({"cycle2": 25, "cycle3": 52}),
    "4/22": MappingProxyType({"cycle2": 24, "cycle3": 60}),
    "5": MappingProxyType({"cycle2": 32, "cycle3": 59}),
    "6/33": MappingProxyType({"cycle2": 31, "cycle3": 58}),
    "7": MappingProxyType({"cycle2": 30, "cycle3": 57}),
    "8/44": MappingProxyType({"cycle2": 29, "cycle3": 56}),
    "9": MappingProxyType({"cycle2": 28, "cycle3": 55}),
})

_PAIRED_KEYS: dict[int, str] = {
    2: "2/11", 11: "2/11",
    4: "4/22", 22: "4/22",
    6: "6/33", 33: "6/33",
    8: "8/44", 44: "8/44",
}


@dataclass(frozen=True)
class RecapAges:
    key: str
    act2: int
    act3: int
    act4: int
    cycle2: int
    cycle3: int


def recap_key(life_path_reduced: int) -> str:
    """Canonical table key for a reduced life path (``22`` and ``4`` share ``"4/22"``)."""
    if life_path_reduced in _PAIRED_KEYS:
        return _PAIRED_KEYS[life_path_reduced]
    if life_path_reduced in (1, 3, 5, 7, 9):
        return str(life_path_reduced)
    raise UnsupportedLifePathError(f"no recap key for life path {life_path_reduced}")


def get_recap_ages(
    life_path_reduced: int,
    acts_table: Mapping[str, Mapping[str, int]] = ACTS_START_AGES,
    cycles_table: Mapping[str, Mapping[str, int]] = CYCLES_START_AGES,
) -> RecapAges:
    key = recap_key(life_path_reduced)
    acts = acts_table.get(key)
    cycles = cycles_table.get(key)
    if acts is None or cycles is None:
        raise RecapLookupFailedError(f"recap table has no entry for key {key!r}")
    return RecapAges(
        key=key,
        act2=acts["act2"],
        act3=acts["act3"],
        act4=acts["act4"],
        cycle2=cycles["cycle2"],
        cycle3=cycles["cycle3"],
    )
