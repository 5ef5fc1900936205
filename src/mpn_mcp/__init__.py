"""MPN MCP - classify manufacturer part numbers and check official replacements."""

__version__ = "0.3.0"

from .categories import ComponentCategory, parse_category
from .types import PartIdentifier, ClassificationResult, NO_MATCH
from .rules import Rule, compute_specificity
from .store import PatternStore, PatternStoreFrozenError, ProviderRegistration
from .resolver import Resolver, default_resolver

__all__ = [
    "__version__",
    "ComponentCategory",
    "parse_category",
    "PartIdentifier",
    "ClassificationResult",
    "NO_MATCH",
    "Rule",
    "compute_specificity",
    "PatternStore",
    "PatternStoreFrozenError",
    "ProviderRegistration",
    "Resolver",
    "default_resolver",
]
