"""Provider base class and the shared replacement check.

A provider bundles one manufacturer's pattern rules, attribute extractors and
replacement knowledge. Subclasses declare their rules in ``PATTERNS`` and
override the ``_series`` / ``_package_code`` / ... hooks, which always receive
an already normalized (trimmed, upper-case) MPN that this provider matches.

Replacement checks follow the same ordered shape for every provider:

1. identical MPN -> compatible (a part always replaces itself)
2. same series or declared-equivalent series, with every "same_or_better"
   attribute of the candidate at least as good as the original's
3. remaining differences must be cosmetic (compatible package, temperature
   grade, lead-free or reel suffix)
4. anything else -> not compatible
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..categories import ComponentCategory, depth_of
from ..packages import packages_compatible
from ..rules import Rule
from ..store import PatternStore
from ..types import PartIdentifier, normalize_mpn


@dataclass
class CompatibilityAttributes:
    """Attributes of one MPN that matter for replacement decisions."""
    mpn: str
    series: str
    category: ComponentCategory
    group: str = ""  # Key into the provider's COMPATIBILITY_RULES
    package: str = ""
    specs: dict[str, Any] = field(default_factory=dict)


def _spec_ok(orig_val: Any, cand_val: Any, direction: str) -> bool:
    """Check if candidate spec meets a same_or_better requirement."""
    if direction == "higher":
        return cand_val >= orig_val
    elif direction == "lower":
        return cand_val <= orig_val
    return True


# Contributions to Provider.similarity; they sum to 1.0
SIMILARITY_WEIGHTS: dict[str, float] = {
    "manufacturer": 0.3,
    "family": 0.4,
    "series": 0.2,
    "details": 0.1,
}


def _detail_agreement(a: CompatibilityAttributes, b: CompatibilityAttributes) -> float:
    """Share of package / spec values known on both sides that are equal."""
    pairs = [(a.package, b.package)]
    pairs.extend((a.specs.get(key), b.specs.get(key)) for key in a.specs.keys() | b.specs.keys())
    known = [(x, y) for x, y in pairs if x not in (None, "", -1) and y not in (None, "", -1)]
    if not known:
        return 1.0
    return sum(1 for x, y in known if x == y) / len(known)


class Provider(ABC):
    """One manufacturer's matching, extraction and replacement logic."""

    provider_id: str = ""
    manufacturer: str = ""

    # (category, pattern) pairs; patterns are matched with fullmatch against the
    # normalized MPN
    PATTERNS: tuple[tuple[ComponentCategory, str], ...] = ()

    # Declared categories; defaults to the categories named in PATTERNS
    SUPPORTED_CATEGORIES: frozenset[ComponentCategory] = frozenset()

    # Series that are drop-in equivalents of each other
    EQUIVALENT_SERIES: dict[str, frozenset[str]] = {}

    # group -> {"must_match": [...], "same_or_better": {spec: "higher" | "lower"}}
    COMPATIBILITY_RULES: dict[str, dict[str, Any]] = {}

    def __init__(self):
        self._rules = tuple(
            Rule(pattern=pattern, category=category, provider_id=self.provider_id)
            for category, pattern in self.PATTERNS
        )
        by_category: dict[ComponentCategory, list[Rule]] = {}
        for rule in self._rules:
            by_category.setdefault(rule.category, []).append(rule)
        self._rules_by_category = {cat: tuple(rules) for cat, rules in by_category.items()}
        self._supported = frozenset(self.SUPPORTED_CATEGORIES) or frozenset(by_category)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider_id={self.provider_id!r})"

    # -------------------------------------------------------------------------
    # Registration and matching
    # -------------------------------------------------------------------------

    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def initialize(self, store: PatternStore) -> None:
        """Register this provider's rules into a store (once per store)."""
        store.register(self.provider_id, self._rules, self._supported)

    def supported_categories(self) -> frozenset[ComponentCategory]:
        return self._supported

    def matches(self, identifier: str | PartIdentifier | None, category: ComponentCategory | None) -> bool:
        """True iff this provider claims the MPN for the given category."""
        mpn = normalize_mpn(identifier)
        if not mpn or category not in self._supported:
            return False
        return any(rule.matches(mpn) for rule in self._rules_by_category.get(category, ()))

    def matched_categories(self, identifier: str | PartIdentifier | None) -> frozenset[ComponentCategory]:
        mpn = normalize_mpn(identifier)
        if not mpn:
            return frozenset()
        return frozenset(
            category for category in self._rules_by_category
            if self.matches(mpn, category)
        )

    def owns(self, identifier: str | PartIdentifier | None) -> bool:
        """True if any of this provider's categories claims the MPN."""
        mpn = normalize_mpn(identifier)
        return bool(mpn) and any(self.matches(mpn, category) for category in self._rules_by_category)

    def primary_category(self, identifier: str | PartIdentifier | None) -> ComponentCategory | None:
        """Most specific category this provider claims the MPN for.

        Manufacturer-qualified categories beat their generic bases, deeper
        refinements (MEMORY_FLASH) beat shallower ones (MEMORY).
        """
        categories = self.matched_categories(identifier)
        if not categories:
            return None
        return max(categories, key=lambda cat: (cat.is_qualified, depth_of(cat), cat.name))

    # -------------------------------------------------------------------------
    # Extractors (never raise; "" or -1 outside this provider's domain)
    # -------------------------------------------------------------------------

    def extract_series(self, mpn: str | PartIdentifier | None) -> str:
        s = self._owned(mpn)
        return self._series(s) if s else ""

    def extract_package_code(self, mpn: str | PartIdentifier | None) -> str:
        s = self._owned(mpn)
        return self._package_code(s) if s else ""

    def extract_density(self, mpn: str | PartIdentifier | None) -> str:
        s = self._owned(mpn)
        return self._density(s) if s else ""

    def extract_pin_count(self, mpn: str | PartIdentifier | None) -> int:
        s = self._owned(mpn)
        return self._pin_count(s) if s else -1

    def extract_flash_size_kb(self, mpn: str | PartIdentifier | None) -> int:
        s = self._owned(mpn)
        return self._flash_size_kb(s) if s else -1

    def extract_temperature_grade(self, mpn: str | PartIdentifier | None) -> str:
        s = self._owned(mpn)
        return self._temperature_grade(s) if s else ""

    def extract_attributes(self, mpn: str | PartIdentifier | None) -> CompatibilityAttributes | None:
        """Build the attribute record used by replacement checks, or None."""
        s = self._owned(mpn)
        if not s:
            return None
        series = self._series(s)
        category = self.primary_category(s)
        if not series or category is None:
            return None
        group, specs = self._specs(s, series, category)
        return CompatibilityAttributes(
            mpn=s,
            series=series,
            category=category,
            group=group,
            package=self._package_code(s),
            specs=specs,
        )

    def auxiliary_attributes(self, mpn: str | PartIdentifier | None) -> dict[str, Any]:
        """Non-empty auxiliary attributes, keyed by name."""
        s = self._owned(mpn)
        if not s:
            return {}
        values = {
            "density": self._density(s),
            "pin_count": self._pin_count(s),
            "flash_size_kb": self._flash_size_kb(s),
            "temperature_grade": self._temperature_grade(s),
        }
        return {k: v for k, v in values.items() if v not in ("", -1)}

    # Hooks: ``s`` is normalized and owned by this provider

    @abstractmethod
    def _series(self, s: str) -> str:
        ...

    def _package_code(self, s: str) -> str:
        return ""

    def _density(self, s: str) -> str:
        return ""

    def _pin_count(self, s: str) -> int:
        return -1

    def _flash_size_kb(self, s: str) -> int:
        return -1

    def _temperature_grade(self, s: str) -> str:
        return ""

    def _specs(self, s: str, series: str, category: ComponentCategory) -> tuple[str, dict[str, Any]]:
        """Compatibility group and spec values for an MPN."""
        return "", {}

    # -------------------------------------------------------------------------
    # Replacement
    # -------------------------------------------------------------------------

    def is_official_replacement(
        self,
        candidate: str | PartIdentifier | None,
        original: str | PartIdentifier | None,
    ) -> bool:
        """Whether ``candidate`` can be fitted where ``original`` was designed in.

        Not symmetric: a 1000V rectifier replaces a 50V one, not the reverse.
        Returns False for empty input and for MPNs outside this provider.
        """
        cand = self._owned(candidate)
        orig = self._owned(original)
        if not cand or not orig:
            return False

        if cand == orig:
            return True

        cand_attrs = self.extract_attributes(cand)
        orig_attrs = self.extract_attributes(orig)
        if cand_attrs is None or orig_attrs is None:
            return False

        # Flash memory never replaces a microcontroller, even from one vendor
        if not cand_attrs.category.is_same_family(orig_attrs.category):
            return False

        if not self.same_series(cand_attrs.series, orig_attrs.series):
            return False

        if cand_attrs.group != orig_attrs.group:
            return False

        rules = self.COMPATIBILITY_RULES.get(orig_attrs.group, {})

        for spec in rules.get("must_match", ()):
            if cand_attrs.specs.get(spec) != orig_attrs.specs.get(spec):
                return False

        for spec, direction in rules.get("same_or_better", {}).items():
            orig_val = orig_attrs.specs.get(spec)
            cand_val = cand_attrs.specs.get(spec)
            if orig_val is None and cand_val is None:
                continue
            if orig_val is None or cand_val is None:
                return False
            if not _spec_ok(orig_val, cand_val, direction):
                return False

        return self.cosmetically_compatible(cand_attrs, orig_attrs)

    def same_series(self, series1: str, series2: str) -> bool:
        if not series1 or not series2:
            return False
        if series1 == series2:
            return True
        return (
            series2 in self.EQUIVALENT_SERIES.get(series1, frozenset())
            or series1 in self.EQUIVALENT_SERIES.get(series2, frozenset())
        )

    def cosmetically_compatible(
        self, candidate: CompatibilityAttributes, original: CompatibilityAttributes
    ) -> bool:
        """Whether the remaining differences (package, grade, suffix) are harmless."""
        return packages_compatible(candidate.package, original.package)

    # -------------------------------------------------------------------------
    # Similarity
    # -------------------------------------------------------------------------

    def similarity(
        self,
        first: str | PartIdentifier | None,
        second: str | PartIdentifier | None,
    ) -> float:
        """Graded likeness of two MPNs in [0, 1], for ranking substitutes.

        Symmetric, unlike ``is_official_replacement``. Builds up from the same
        attribute records: both ours (0.3), same component family (+0.4),
        same or equivalent series (+0.2), then the share of package and spec
        values that agree (up to +0.1). Identical MPNs score 1.0, MPNs outside
        this provider 0.0.
        """
        a = self._owned(first)
        b = self._owned(second)
        if not a or not b:
            return 0.0
        if a == b:
            return 1.0

        score = SIMILARITY_WEIGHTS["manufacturer"]
        attrs_a = self.extract_attributes(a)
        attrs_b = self.extract_attributes(b)
        if attrs_a is None or attrs_b is None:
            return score
        if not attrs_a.category.is_same_family(attrs_b.category):
            return score
        score += SIMILARITY_WEIGHTS["family"]
        if not self.same_series(attrs_a.series, attrs_b.series):
            return round(score, 3)
        score += SIMILARITY_WEIGHTS["series"]
        score += SIMILARITY_WEIGHTS["details"] * _detail_agreement(attrs_a, attrs_b)
        return round(min(score, 1.0), 3)

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def description(self) -> dict[str, Any]:
        return {
            "id": self.provider_id,
            "manufacturer": self.manufacturer,
            "categories": sorted(cat.name for cat in self._supported),
            "rules": len(self._rules),
        }

    def _owned(self, mpn: str | PartIdentifier | None) -> str:
        """Normalized MPN if this provider claims it, else ""."""
        s = normalize_mpn(mpn)
        if not s or not self.owns(s):
            return ""
        return s
