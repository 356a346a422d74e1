"""
Store Registry
Per-currency registration and lookup of comparison storefronts
"""

from typing import Dict, List, Optional, Tuple

from price_worker.config import DEFAULT_CURRENCY
from price_worker.scrapers.stores.base import StoreConfig


class StoreRegistry:
    """
    Registry of comparison stores keyed by currency code.

    Stores keep their registration order; every store registered for a
    currency is attempted for products in that currency. Unknown currencies
    fall back to the default currency's stores.
    """

    def __init__(self, fallback_currency: str = DEFAULT_CURRENCY):
        self._stores: Dict[str, List[StoreConfig]] = {}
        self.fallback_currency = fallback_currency.upper()
        self._frozen = False

    def register(self, currency: str, store: StoreConfig) -> None:
        """
        Register a store for a currency.

        Raises:
            ValueError: If a store with this name is already registered for the currency
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError("Store registry is frozen; stores can only be added at startup")

        code = currency.upper()
        stores = self._stores.setdefault(code, [])

        if any(s.name.upper() == store.name.upper() for s in stores):
            raise ValueError(f"Store '{store.name}' is already registered for {code}")

        stores.append(store)

    def freeze(self) -> 'StoreRegistry':
        """Reject further registrations."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get_stores_for_currency(self, currency: Optional[str]) -> Tuple[StoreConfig, ...]:
        """
        Get the ordered stores for a currency code (case-insensitive).

        Returns:
            Stores for the currency, or the fallback currency's stores if the
            code is unknown or empty
        """
        code = (currency or '').upper()
        stores = self._stores.get(code)
        if stores is None:
            stores = self._stores.get(self.fallback_currency, [])
        return tuple(stores)

    def get_by_name(self, currency: str, name: str) -> Optional[StoreConfig]:
        """Get a store by name (case-insensitive) within a currency's stores."""
        for store in self.get_stores_for_currency(currency):
            if store.name.upper() == name.upper():
                return store
        return None

    def currencies(self) -> List[str]:
        return list(self._stores.keys())

    def count(self) -> int:
        """Total number of (currency, store) registrations."""
        return sum(len(stores) for stores in self._stores.values())

    def __repr__(self) -> str:
        currencies = ', '.join(
            f"{code}: {len(stores)}" for code, stores in self._stores.items()
        )
        return f"StoreRegistry({self.count()} stores; {currencies})"
