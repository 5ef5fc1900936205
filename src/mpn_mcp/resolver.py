"""Resolve an MPN to the single best (category, provider) match.

Every rule in the store whose pattern fits the MPN, and whose provider agrees
that it claims the MPN for that rule's category, is a candidate. Candidates
are ranked by:

1. rule specificity (higher wins)
2. manufacturer-qualified category over its generic base
3. deeper category over shallower (MEMORY_FLASH over MEMORY)
4. registration order (provider order, then rule order within a provider)

The first candidate whose attributes extract cleanly wins. A provider that
raises is logged and its candidate dropped; classification never raises.
"""

import logging
import threading
from typing import Any, Iterable

from .categories import ComponentCategory, depth_of
from .config import MAX_MPN_LENGTH
from .providers import PROVIDERS, SIMILARITY_WEIGHTS, Provider, build_store
from .rules import Rule
from .store import PatternStore
from .types import NO_MATCH, ClassificationResult, PartIdentifier

logger = logging.getLogger(__name__)


class Resolver:
    """Classification entry point over a frozen PatternStore."""

    def __init__(
        self,
        store: PatternStore | None = None,
        providers: Iterable[Provider] | None = None,
    ):
        self._providers = tuple(PROVIDERS if providers is None else providers)
        if store is None:
            store = build_store(self._providers)
        store.freeze()
        self._store = store
        self._by_id: dict[str, Provider] = {p.provider_id: p for p in self._providers}
        # Rule -> position in registration order (provider order, then rule index)
        self._order: dict[Rule, int] = {}
        for position, rule in enumerate(store.all_rules()):
            self._order.setdefault(rule, position)

    @property
    def store(self) -> PatternStore:
        return self._store

    @property
    def providers(self) -> tuple[Provider, ...]:
        return self._providers

    def provider(self, provider_id: str) -> Provider | None:
        return self._by_id.get(provider_id)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def classify(
        self,
        mpn: str | PartIdentifier | None,
        category: ComponentCategory | None = None,
    ) -> ClassificationResult:
        """Best match for an MPN, optionally restricted to one category.

        Returns NO_MATCH for blank, over-long or unrecognized input. A generic
        category only considers rules registered for that exact category.
        """
        identifier = self._parse(mpn)
        if identifier is None:
            return NO_MATCH
        for rule, provider in self._ranked(identifier.normalized, category):
            result = self._build_result(identifier.normalized, rule, provider)
            if result is not None:
                return result
        return ClassificationResult(mpn=identifier.normalized)

    def candidates(
        self,
        mpn: str | PartIdentifier | None,
        category: ComponentCategory | None = None,
    ) -> list[ClassificationResult]:
        """Every surviving candidate in ranking order (the first one is what classify returns)."""
        identifier = self._parse(mpn)
        if identifier is None:
            return []
        results = []
        for rule, provider in self._ranked(identifier.normalized, category):
            result = self._build_result(identifier.normalized, rule, provider)
            if result is not None:
                results.append(result)
        return results

    def describe(self, mpn: str | PartIdentifier | None) -> dict[str, Any]:
        """Classification plus the competing candidates, for diagnostics."""
        candidates = self.candidates(mpn)
        if not candidates:
            identifier = self._parse(mpn)
            return ClassificationResult(mpn=identifier.normalized if identifier else "").to_dict()
        result = candidates[0].to_dict()
        result["candidates"] = [
            {
                "provider": c.provider_id,
                "category": c.category.name,
                "pattern": c.pattern,
                "specificity": list(c.specificity),
            }
            for c in candidates
        ]
        return result

    # -------------------------------------------------------------------------
    # Replacement
    # -------------------------------------------------------------------------

    def is_official_replacement(
        self,
        candidate: str | PartIdentifier | None,
        original: str | PartIdentifier | None,
        provider_id: str | None = None,
    ) -> bool:
        """Whether ``candidate`` officially replaces ``original``.

        Asks the given provider, or the provider that classifies ``original``
        when none is given. Unknown provider ids and unclassifiable originals
        give False.
        """
        if provider_id is not None:
            provider = self._by_id.get(provider_id)
        else:
            result = self.classify(original)
            provider = self._by_id.get(result.provider_id) if result.matched else None
        if provider is None:
            return False
        try:
            return bool(provider.is_official_replacement(candidate, original))
        except Exception:
            logger.warning(
                f"Provider '{provider.provider_id}' failed replacement check "
                f"{candidate!r} -> {original!r}",
                exc_info=True,
            )
            return False

    def similarity(
        self,
        first: str | PartIdentifier | None,
        second: str | PartIdentifier | None,
    ) -> float:
        """Graded likeness of two MPNs in [0, 1].

        MPNs classified by one provider are scored by that provider. Parts
        from different manufacturers only earn the shared-family weight.
        """
        a = self.classify(first)
        b = self.classify(second)
        if not a.matched or not b.matched:
            return 0.0
        if a.provider_id != b.provider_id:
            return SIMILARITY_WEIGHTS["family"] if a.category.is_same_family(b.category) else 0.0
        provider = self._by_id[a.provider_id]
        try:
            return provider.similarity(a.mpn, b.mpn)
        except Exception:
            logger.warning(
                f"Provider '{provider.provider_id}' failed similarity {a.mpn!r} ~ {b.mpn!r}",
                exc_info=True,
            )
            return 0.0

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _parse(self, mpn: str | PartIdentifier | None) -> PartIdentifier | None:
        identifier = mpn if isinstance(mpn, PartIdentifier) else PartIdentifier.parse(mpn)
        if identifier is None:
            return None
        if len(identifier.normalized) > MAX_MPN_LENGTH:
            logger.debug(f"MPN longer than {MAX_MPN_LENGTH} chars, not classified")
            return None
        return identifier

    def _ranked(
        self, normalized: str, category: ComponentCategory | None
    ) -> list[tuple[Rule, Provider]]:
        rules = self._store.all_rules() if category is None else self._store.rules_for(category)
        matched = []
        for rule in rules:
            provider = self._by_id.get(rule.provider_id)
            if provider is None or not rule.matches(normalized):
                continue
            try:
                claimed = provider.matches(normalized, rule.category)
            except Exception:
                logger.warning(
                    f"Provider '{rule.provider_id}' failed matching {normalized!r} "
                    f"for {rule.category.name}",
                    exc_info=True,
                )
                continue
            if claimed:
                matched.append((rule, provider))
        matched.sort(key=lambda pair: self._rank_key(pair[0]))
        return matched

    def _rank_key(self, rule: Rule) -> tuple:
        return (
            tuple(-value for value in rule.specificity),
            not rule.category.is_qualified,
            -depth_of(rule.category),
            self._order.get(rule, len(self._order)),
        )

    def _build_result(self, normalized: str, rule: Rule, provider: Provider) -> ClassificationResult | None:
        try:
            series = provider.extract_series(normalized)
            package_code = provider.extract_package_code(normalized)
            attributes = provider.auxiliary_attributes(normalized)
        except Exception:
            logger.warning(
                f"Provider '{provider.provider_id}' failed extracting attributes of {normalized!r}",
                exc_info=True,
            )
            return None
        return ClassificationResult(
            mpn=normalized,
            category=rule.category,
            provider_id=provider.provider_id,
            series=series,
            package_code=package_code,
            specificity=rule.specificity,
            pattern=rule.pattern,
            attributes=attributes,
        )


# Global instance with thread safety
_resolver: Resolver | None = None
_resolver_lock = threading.Lock()


def default_resolver() -> Resolver:
    """Get or create the process-wide resolver over every registered provider."""
    global _resolver
    if _resolver is None:
        with _resolver_lock:
            # Double-check locking pattern
            if _resolver is None:
                _resolver = Resolver()
    return _resolver
