from abc import ABC, abstractmethod
from typing import Any

from .errors import InvalidConfigurationError
from .schemas import LineItem, Product
from .utils import to_number


class RevenueStrategy(ABC):
    """
    Computes the money a single line item brought in.
    Instances are callable, so a plain function with the same signature can stand in for one.
    """

    @abstractmethod
    def calculate(self, item: LineItem, product: Product) -> float:
        pass

    def __call__(self, item: LineItem, product: Product) -> float:
        return self.calculate(item, product)


class BonusStrategy(ABC):
    """
    Computes a seller's bonus from their 0-based rank among `total` sellers.
    `seller` only needs to expose a numeric `profit`.
    """

    @abstractmethod
    def calculate(self, index: int, total: int, seller: Any) -> float:
        pass

    def __call__(self, index: int, total: int, seller: Any) -> float:
        return self.calculate(index, total, seller)


class SimpleRevenueStrategy(RevenueStrategy):
    """sale_price * quantity, less the line's percentage discount."""

    def calculate(self, item: LineItem, product: Product) -> float:
        discount_factor = 1 - (item.discount / 100)
        return item.sale_price * item.quantity * discount_factor


class ProfitRankBonusStrategy(BonusStrategy):
    """
    Pays a share of the seller's (non-negative) profit depending on rank:
    1st place `first`, 2nd and 3rd `podium`, last place nothing, everyone else `rest`.

    Rules are checked in that order: 1st place, then last place, then 2nd/3rd.
    A lone seller is paid as 1st place; with two or three sellers the last one
    gets nothing even though they would also be on the podium.
    """

    def __init__(self, first: float = 0.15, podium: float = 0.10, rest: float = 0.05):
        self.first = first
        self.podium = podium
        self.rest = rest

    def calculate(self, index: int, total: int, seller: Any) -> float:
        profit = max(0, to_number(getattr(seller, "profit", 0)))

        if index == 0:
            return profit * self.first
        elif index == total - 1:
            return 0
        elif index in (1, 2):
            return profit * self.podium
        else:
            return profit * self.rest


# --- Strategy Registry ---
# Names selectable through settings.REVENUE_STRATEGY / settings.BONUS_STRATEGY.
REVENUE_STRATEGIES: dict[str, type[RevenueStrategy]] = {
    "simple": SimpleRevenueStrategy,
}

BONUS_STRATEGIES: dict[str, type[BonusStrategy]] = {
    "profit_rank": ProfitRankBonusStrategy,
}


def get_revenue_strategy(name: str) -> RevenueStrategy:
    try:
        return REVENUE_STRATEGIES[name]()
    except KeyError:
        raise InvalidConfigurationError(
            f"Unknown revenue strategy '{name}'. Available: {', '.join(REVENUE_STRATEGIES)}"
        ) from None


def get_bonus_strategy(name: str) -> BonusStrategy:
    try:
        return BONUS_STRATEGIES[name]()
    except KeyError:
        raise InvalidConfigurationError(
            f"Unknown bonus strategy '{name}'. Available: {', '.join(BONUS_STRATEGIES)}"
        ) from None
