"""Value types passed between the resolver, the store and providers."""

from dataclasses import dataclass, field
from typing import Any

from .categories import ComponentCategory


@dataclass(frozen=True)
class PartIdentifier:
    """A raw MPN plus its normalized (trimmed, upper-cased) form."""
    raw: str
    normalized: str

    @classmethod
    def parse(cls, mpn: str | None) -> "PartIdentifier | None":
        """Normalize an MPN. Returns None for None, non-string or blank input."""
        if not isinstance(mpn, str):
            return None
        normalized = normalize_mpn(mpn)
        if not normalized:
            return None
        return cls(raw=mpn, normalized=normalized)

    def __str__(self) -> str:
        return self.normalized


def normalize_mpn(mpn: "str | PartIdentifier | None") -> str:
    """Trim whitespace and case-fold an MPN: ' lm358n ' -> 'LM358N'"""
    if isinstance(mpn, PartIdentifier):
        return mpn.normalized
    if not isinstance(mpn, str):
        return ""
    return mpn.strip().upper()


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of a classification query.

    A result with ``category`` None is the "no match" result; use ``matched``
    rather than comparing against NO_MATCH when the input string matters.
    """
    mpn: str = ""  # Normalized input ("" for blank input)
    category: ComponentCategory | None = None
    provider_id: str = ""
    series: str = ""
    package_code: str = ""
    specificity: tuple[int, ...] = ()
    pattern: str = ""  # Pattern of the winning rule
    attributes: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def matched(self) -> bool:
        return self.category is not None

    def to_dict(self) -> dict[str, Any]:
        if not self.matched:
            return {"mpn": self.mpn, "matched": False}
        result: dict[str, Any] = {
            "mpn": self.mpn,
            "matched": True,
            "category": self.category.name,
            "base_category": self.category.base.name,
            "provider": self.provider_id,
            "series": self.series,
            "package_code": self.package_code,
            "specificity": list(self.specificity),
        }
        if self.attributes:
            result["attributes"] = dict(self.attributes)
        return result


NO_MATCH = ClassificationResult()
