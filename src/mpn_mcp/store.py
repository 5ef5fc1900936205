"""Build-once registry of pattern rules, grouped by category."""

import logging
import threading
from dataclasses import dataclass
from typing import Iterable

from .categories import ComponentCategory
from .rules import Rule

logger = logging.getLogger(__name__)


class PatternStoreFrozenError(RuntimeError):
    """Raised when a provider registers rules after the store was frozen."""


@dataclass(frozen=True)
class ProviderRegistration:
    """What one provider contributed to a store."""
    provider_id: str
    supported_categories: frozenset[ComponentCategory]
    rules: tuple[Rule, ...]
    order: int  # Registration position, used as the last tie-break


class PatternStore:
    """Append-only mapping of category -> rules, frozen before first use.

    Rules for a category are kept in registration order. Once frozen the store
    never changes, so concurrent readers need no locking. To add providers at
    runtime build a new store and swap the reference.
    """

    def __init__(self):
        self._rules: dict[ComponentCategory, list[Rule]] = {}
        self._registrations: dict[str, ProviderRegistration] = {}
        self._frozen = False
        self._lock = threading.Lock()  # Guards the open (construction) phase only

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        if self._frozen:
            return
        with self._lock:
            self._frozen = True
            # Hand out tuples from now on
            self._rules = {cat: tuple(rules) for cat, rules in self._rules.items()}  # type: ignore[misc]
        logger.info(
            f"Pattern store frozen: {len(self._registrations)} providers, {len(self)} rules"
        )

    def register(
        self,
        provider_id: str,
        rules: Iterable[Rule],
        supported_categories: Iterable[ComponentCategory] | None = None,
    ) -> None:
        """Add a provider's rules.

        Re-registering the same provider id with identical rules is a no-op.

        Raises:
            PatternStoreFrozenError: the store is already frozen
            ValueError: the rules disagree with the declared categories, or the
                provider id was already registered with different rules
        """
        if self._frozen:
            raise PatternStoreFrozenError(
                f"Cannot register provider '{provider_id}': pattern store is frozen"
            )
        if not provider_id:
            raise ValueError("provider_id must be a non-empty string")

        rules = tuple(rules)
        categories = frozenset(
            supported_categories if supported_categories is not None
            else (rule.category for rule in rules)
        )

        for rule in rules:
            if rule.provider_id != provider_id:
                raise ValueError(
                    f"Rule '{rule.pattern}' is owned by '{rule.provider_id}', not '{provider_id}'"
                )
            if rule.category not in categories:
                raise ValueError(
                    f"Provider '{provider_id}' registers {rule.category.name} "
                    f"but does not declare it as supported"
                )
        for category in categories:
            if category.is_qualified and category.base not in categories:
                raise ValueError(
                    f"Provider '{provider_id}' supports {category.name} "
                    f"but not its base category {category.base.name}"
                )

        with self._lock:
            if self._frozen:
                raise PatternStoreFrozenError(
                    f"Cannot register provider '{provider_id}': pattern store is frozen"
                )
            existing = self._registrations.get(provider_id)
            if existing is not None:
                if existing.rules == rules and existing.supported_categories == categories:
                    return
                raise ValueError(f"Provider '{provider_id}' is already registered with different rules")

            self._registrations[provider_id] = ProviderRegistration(
                provider_id=provider_id,
                supported_categories=categories,
                rules=rules,
                order=len(self._registrations),
            )
            for rule in rules:
                self._rules.setdefault(rule.category, []).append(rule)

        logger.debug(f"Registered provider '{provider_id}' with {len(rules)} rules")

    def rules_for(self, category: ComponentCategory | None) -> tuple[Rule, ...]:
        """Rules for a category in registration order. Unknown category -> empty."""
        if category is None:
            return ()
        return tuple(self._rules.get(category, ()))

    def all_rules(self) -> tuple[Rule, ...]:
        """Every rule, in provider registration order."""
        return tuple(rule for reg in self.providers() for rule in reg.rules)

    def categories(self) -> frozenset[ComponentCategory]:
        return frozenset(self._rules)

    def providers(self) -> tuple[ProviderRegistration, ...]:
        return tuple(sorted(self._registrations.values(), key=lambda reg: reg.order))

    def registration(self, provider_id: str) -> ProviderRegistration | None:
        return self._registrations.get(provider_id)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._registrations

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._rules.values())
