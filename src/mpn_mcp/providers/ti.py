"""Texas Instruments: classic op-amps, LM35 sensors and linear regulators.

TI part numbers are mostly "base part + package suffix" (LM358DR, LM7805CT),
so everything here is driven by one series table. Each series carries its
anchored pattern, the prefix that the package suffix follows, and the
compatibility group its replacement rules come from.
"""

import re
from dataclasses import dataclass
from typing import Any

from ..categories import ComponentCategory
from ..packages import resolve_suffix
from .base import CompatibilityAttributes, Provider

C = ComponentCategory


@dataclass(frozen=True)
class Series:
    name: str
    category: ComponentCategory
    pattern: str
    prefix: str  # Package suffix starts where this matches
    group: str


SERIES: tuple[Series, ...] = (
    # Voltage regulators
    Series("78xx", C.VOLTAGE_REGULATOR_LINEAR_TI,
           r"^(?:LM|UA)78[0-9]{2}(?:[A-Z]*(?:CT|T|KC|KV|MP|DT))?$", r"^(?:LM|UA)78[0-9]{2}", "fixed"),
    Series("79xx", C.VOLTAGE_REGULATOR_LINEAR_TI,
           r"^(?:LM|UA)79[0-9]{2}(?:[A-Z]*(?:CT|T|KC|KV|MP|DT))?$", r"^(?:LM|UA)79[0-9]{2}", "fixed"),
    Series("LM317", C.VOLTAGE_REGULATOR_LINEAR_TI,
           r"^LM317(?:T|K|H|MP|S|AT|AH|AEMP|AIDCT|AMDCYR|DCY|DCYR|KCS|KTTR)?$", r"^LM317A?", "adjustable"),
    Series("LM350", C.VOLTAGE_REGULATOR_LINEAR_TI,
           r"^LM350(?:T|K|AT|AK|MP|S)?$", r"^LM350A?", "adjustable"),
    Series("LM338", C.VOLTAGE_REGULATOR_LINEAR_TI,
           r"^LM338(?:T|K|S|MP)?$", r"^LM338", "adjustable"),
    Series("TL431", C.VOLTAGE_REGULATOR_LINEAR_TI,
           r"^TL431[A-Z0-9]*$", r"^TL431", "reference"),
    # Op-amps and comparators
    Series("LM358", C.OPAMP_TI,
           r"^LM358(?:[AMDP])?(?:N|D|P|DG|PW|DR|DGK|DBV|DRG4|DGKR|PWR)?$", r"^LM358", "opamp"),
    Series("LM2904", C.OPAMP_TI,
           r"^LM2904(?:[AV])?(?:N|D|P|DG|PW|DR|DGK|DGKR|PWR)?$", r"^LM2904", "opamp"),
    Series("LM1458", C.OPAMP_TI, r"^LM1458(?:N|D|P)?$", r"^LM1458", "opamp"),
    Series("MC1458", C.OPAMP_TI, r"^MC1458(?:N|D|P)?$", r"^MC1458", "opamp"),
    Series("RC4558", C.OPAMP_TI, r"^RC4558(?:N|D|P|DR)?$", r"^RC4558", "opamp"),
    Series("LM324", C.OPAMP_TI,
           r"^LM324(?:[A-Z0-9]*(?:N|D|P|DG|PW))?$", r"^LM324", "opamp"),
    Series("LM2902", C.OPAMP_TI,
           r"^LM2902(?:[A-Z0-9]*(?:N|D|P|DG|PW))?$", r"^LM2902", "opamp"),
    Series("TL072", C.OPAMP_TI, r"^TL072[A-Z0-9]*$", r"^TL072", "opamp"),
    Series("TL074", C.OPAMP_TI, r"^TL074[A-Z0-9]*$", r"^TL074", "opamp"),
    Series("NE5532", C.OPAMP_TI, r"^NE5532[A-Z0-9]*$", r"^NE5532", "opamp"),
    Series("LM311", C.OPAMP_TI, r"^LM311[A-Z0-9]*$", r"^LM311", "opamp"),
    # Temperature sensors: a letter after 35, never a digit (LM358 is an op-amp)
    Series("LM35", C.TEMPERATURE_SENSOR_TI, r"^LM35[A-D][A-Z0-9-]*$", r"^LM35[A-D]", "sensor"),
)

_COMPILED: tuple[tuple[Series, re.Pattern[str], re.Pattern[str]], ...] = tuple(
    (series, re.compile(series.pattern), re.compile(series.prefix)) for series in SERIES
)

# Checked with endswith, longest suffix first
OPAMP_PACKAGE_SUFFIXES: dict[str, str] = {
    "DRG4": "SOIC", "DGKR": "MSOP", "DGK": "MSOP", "PWR": "TSSOP", "DBV": "SOT-23",
    "PW": "TSSOP", "DG": "SOIC", "DR": "SOIC", "D": "SOIC", "N": "DIP", "P": "DIP",
}

REGULATOR_PACKAGE_SUFFIXES: dict[str, str] = {
    "DBZR": "SOT-23", "DBZ": "SOT-23", "KTTR": "TO-263", "DCYR": "SOT-223", "DCY": "SOT-223",
    "CT": "TO-220", "KC": "TO-252", "KV": "TO-252", "MP": "SOT-223", "DT": "SOT-223",
    "LP": "TO-92", "T": "TO-220", "K": "TO-3", "H": "TO-39", "S": "TO-263",
}

SENSOR_PACKAGE_SUFFIXES: dict[str, str] = {"Z": "TO-92", "T": "TO-220", "M": "SOIC", "H": "TO-46"}

_SUFFIX_TABLES: dict[str, dict[str, str]] = {
    "opamp": OPAMP_PACKAGE_SUFFIXES,
    "fixed": REGULATOR_PACKAGE_SUFFIXES,
    "adjustable": REGULATOR_PACKAGE_SUFFIXES,
    "reference": REGULATOR_PACKAGE_SUFFIXES,
    "sensor": SENSOR_PACKAGE_SUFFIXES,
}

# Packages a board can take interchangeably within one group
INTERCHANGEABLE_PACKAGES: dict[str, frozenset[str]] = {
    "opamp": frozenset({"DIP", "SOIC"}),
    "fixed": frozenset({"TO-220", "TO-252", "SOT-223"}),
    "adjustable": frozenset({"TO-220", "TO-252", "SOT-223"}),
}

# Adjustable regulator output current (A)
ADJUSTABLE_CURRENTS: dict[str, float] = {"LM317": 1.5, "LM350": 3.0, "LM338": 5.0}

_FIXED_VOLTAGE = re.compile(r"^(?:LM|UA)7([89])([0-9]{2})")


class TIProvider(Provider):
    provider_id = "ti"
    manufacturer = "Texas Instruments"

    PATTERNS = tuple(
        (category, series.pattern)
        for series in SERIES
        for category in (series.category.base, series.category)
    )

    EQUIVALENT_SERIES = {
        "LM358": frozenset({"LM2904", "MC1458", "LM1458", "RC4558"}),
        "LM324": frozenset({"LM2902"}),
        "LM317": frozenset({"LM350", "LM338"}),
        "LM350": frozenset({"LM317", "LM338"}),
        "LM338": frozenset({"LM317", "LM350"}),
    }

    COMPATIBILITY_RULES = {
        "fixed": {
            "must_match": ["output_voltage_v"],
        },
        "adjustable": {
            "same_or_better": {"output_current_a": "higher"},  # LM338 replaces LM317
        },
        "sensor": {
            "must_match": ["accuracy_grade"],
        },
    }

    def _match_series(self, s: str) -> tuple[Series, re.Pattern[str]] | None:
        for series, pattern, prefix in _COMPILED:
            if pattern.fullmatch(s):
                return series, prefix
        return None

    def _series(self, s: str) -> str:
        found = self._match_series(s)
        return found[0].name if found else ""

    def _package_code(self, s: str) -> str:
        found = self._match_series(s)
        if found is None:
            return ""
        series, prefix = found
        suffix = s[prefix.match(s).end():]
        if not suffix:
            return ""
        table = _SUFFIX_TABLES[series.group]
        for code in sorted(table, key=len, reverse=True):
            if suffix.endswith(code):
                return table[code]
        # Codes outside the series table fall back to the shared suffix vocabulary
        return resolve_suffix(suffix)

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        group = self._match_series(s)[0].group
        if group == "fixed":
            match = _FIXED_VOLTAGE.match(s)
            volts = int(match.group(2))
            return group, {"output_voltage_v": -volts if match.group(1) == "9" else volts}
        if group == "adjustable":
            return group, {"output_current_a": ADJUSTABLE_CURRENTS[series]}
        if group == "sensor":
            return group, {"accuracy_grade": s[4]}
        return group, {}

    def cosmetically_compatible(
        self, candidate: CompatibilityAttributes, original: CompatibilityAttributes
    ) -> bool:
        if not candidate.package or not original.package:
            return True
        if candidate.package == original.package:
            return True
        interchangeable = INTERCHANGEABLE_PACKAGES.get(candidate.group, frozenset())
        return candidate.package in interchangeable and original.package in interchangeable
