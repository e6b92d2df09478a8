"""
Seller report engine.

Three stages, each feeding the next:
  1. Indexer - zeroed per-seller accumulators plus seller/product lookups.
  2. Folder  - one pass over purchase records and their line items.
  3. Ranker  - sort by profit, assign bonuses, pick top products, round.

The engine does no I/O; loading and saving live in the pipeline.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from operator import attrgetter
from types import MappingProxyType
from typing import Any, Callable, Optional

from pydantic import ValidationError

from .errors import InvalidConfigurationError, InvalidInputError, InvalidStrategyError
from .schemas import (
    Product,
    PurchaseRecord,
    ReportEntry,
    ReportOptions,
    SalesDataset,
    Seller,
    TopProduct,
)
from .utils import round_money, to_number

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 10
REQUIRED_COLLECTIONS = ("sellers", "products", "purchase_records")


@dataclass
class SellerStat:
    """Running totals for one seller. Only the Folder mutates these."""

    id: str
    name: str
    revenue: float = 0
    profit: float = 0
    sales_count: int = 0
    products_sold: dict[str, float] = field(default_factory=dict)

    def freeze(self) -> "SellerSnapshot":
        return SellerSnapshot(
            id=self.id,
            name=self.name,
            revenue=self.revenue,
            profit=self.profit,
            sales_count=self.sales_count,
            products_sold=MappingProxyType(dict(self.products_sold)),
        )


@dataclass(frozen=True)
class SellerSnapshot:
    """Read-only copy of a SellerStat, handed to bonus strategies by the Ranker."""

    id: str
    name: str
    revenue: float
    profit: float
    sales_count: int
    products_sold: Mapping[str, float]


class SellerLedger:
    """
    Owns the SellerStat list (in seller-list order) and an id -> position index into it.
    """

    def __init__(self, sellers: Sequence[Seller]):
        self.stats: list[SellerStat] = []
        self._positions: dict[str, int] = {}
        for seller in sellers:
            self._positions[seller.id] = len(self.stats)
            self.stats.append(SellerStat(id=seller.id, name=seller.full_name))

    def get(self, seller_id: Optional[str]) -> Optional[SellerStat]:
        position = self._positions.get(seller_id)
        if position is None:
            return None
        return self.stats[position]

    def __len__(self) -> int:
        return len(self.stats)


@dataclass
class FoldSummary:
    records_applied: int = 0
    records_skipped: int = 0
    items_applied: int = 0
    items_skipped: int = 0


# ---------------------------------------------------------------------------
# Input / options validation
# ---------------------------------------------------------------------------


def _require_collection(name: str, value: Any) -> Sequence:
    if value is None:
        raise InvalidInputError(f"'{name}' is missing.")
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidInputError(f"'{name}' must be a sequence, got {type(value).__name__}.")
    if len(value) == 0:
        raise InvalidInputError(f"'{name}' must not be empty.")
    return value


def validate_dataset(data: Any) -> SalesDataset:
    """
    Turns a mapping (or an existing SalesDataset) into a validated SalesDataset.
    Raises InvalidInputError if a collection is missing, not a sequence, empty or malformed.
    """
    if isinstance(data, SalesDataset):
        for name in REQUIRED_COLLECTIONS:
            _require_collection(name, getattr(data, name))
        return data

    if not isinstance(data, Mapping):
        raise InvalidInputError("Sales data must be a mapping with sellers, products and purchase_records.")

    collections = {name: _require_collection(name, data.get(name)) for name in REQUIRED_COLLECTIONS}
    try:
        return SalesDataset(**{name: list(value) for name, value in collections.items()})
    except ValidationError as e:
        raise InvalidInputError(f"Sales data does not match the schema:\n{e}") from e


def resolve_options(options: Any) -> ReportOptions:
    """Validates the revenue/bonus strategies. Raises InvalidConfigurationError."""
    if isinstance(options, ReportOptions):
        return options
    if options is None or not isinstance(options, Mapping):
        raise InvalidConfigurationError("Options must be a mapping or a ReportOptions instance.")
    try:
        return ReportOptions.model_validate(dict(options))
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid report options:\n{e}") from e


# ---------------------------------------------------------------------------
# 1. Indexer
# ---------------------------------------------------------------------------


def build_indexes(
    sellers: Sequence[Seller], products: Sequence[Product]
) -> tuple[SellerLedger, dict[str, Product]]:
    """Builds the seller ledger and the SKU -> Product lookup. Later duplicates win."""
    _require_collection("sellers", sellers)
    _require_collection("products", products)

    ledger = SellerLedger(sellers)
    product_index = {product.sku: product for product in products}

    logger.debug(f"Indexed {len(ledger)} sellers and {len(product_index)} products.")
    return ledger, product_index


# ---------------------------------------------------------------------------
# 2. Folder
# ---------------------------------------------------------------------------


def fold_purchase_records(
    records: Sequence[PurchaseRecord],
    ledger: SellerLedger,
    product_index: Mapping[str, Product],
    revenue_strategy: Callable[..., Any],
) -> FoldSummary:
    """
    Accumulates revenue, profit, sales count and products sold into the ledger.

    Records for unknown sellers are skipped entirely; items with unknown SKUs are
    skipped on their own while the rest of the record still applies.
    """
    if not callable(revenue_strategy):
        raise InvalidStrategyError("Revenue strategy must be callable.")

    summary = FoldSummary()

    for record in records:
        seller = ledger.get(record.seller_id)
        if seller is None:
            logger.debug(f"Skipping record {record.receipt_id}: unknown seller '{record.seller_id}'.")
            summary.records_skipped += 1
            continue

        seller.sales_count += 1
        seller.revenue += record.total_amount
        summary.records_applied += 1

        for item in record.items:
            product = product_index.get(item.sku)
            if product is None:
                logger.debug(f"Skipping item in record {record.receipt_id}: unknown SKU '{item.sku}'.")
                summary.items_skipped += 1
                continue

            cost = product.purchase_price * item.quantity
            revenue = to_number(revenue_strategy(item, product))
            seller.profit += revenue - cost

            if item.sku not in seller.products_sold:
                seller.products_sold[item.sku] = 0
            seller.products_sold[item.sku] += item.quantity
            summary.items_applied += 1

    return summary


# ---------------------------------------------------------------------------
# 3. Ranker
# ---------------------------------------------------------------------------


def top_products(products_sold: Mapping[str, float], limit: int = TOP_PRODUCTS_LIMIT) -> list[TopProduct]:
    """Best sellers by quantity. Equal quantities keep their first-sold order."""
    ranked = sorted(products_sold.items(), key=lambda pair: pair[1], reverse=True)
    return [TopProduct(sku=sku, quantity=quantity) for sku, quantity in ranked[:limit]]


def rank_sellers(
    stats: Sequence[SellerStat],
    bonus_strategy: Callable[..., Any],
    top_limit: int = TOP_PRODUCTS_LIMIT,
) -> list[ReportEntry]:
    """
    Sorts sellers by profit (descending, stable) and turns each into a ReportEntry.
    The bonus strategy is called as bonus_strategy(index, total, snapshot) with a
    read-only SellerSnapshot, after the rest of the entry has been computed.
    """
    if not callable(bonus_strategy):
        raise InvalidStrategyError("Bonus strategy must be callable.")

    # reverse=True keeps equal profits in seller-list order
    ranked = [stat.freeze() for stat in sorted(stats, key=attrgetter("profit"), reverse=True)]
    total = len(ranked)

    report = []
    for index, seller in enumerate(ranked):
        fields = {
            "seller_id": str(seller.id),
            "name": seller.name,
            "revenue": round_money(seller.revenue),
            "profit": round_money(seller.profit),
            "sales_count": seller.sales_count,
            "top_products": top_products(seller.products_sold, top_limit),
        }
        bonus = to_number(bonus_strategy(index, total, seller))
        report.append(ReportEntry(**fields, bonus=round_money(bonus)))
    return report


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def analyze_sales_data(data: Any, options: Any, top_limit: int = TOP_PRODUCTS_LIMIT) -> list[ReportEntry]:
    """
    Builds the seller performance report.

    Args:
        data: Mapping (or SalesDataset) with sellers, products and purchase_records.
        options: Mapping (or ReportOptions) with calculate_revenue and calculate_bonus.
        top_limit: How many products to keep per seller.

    Returns:
        One ReportEntry per seller, best profit first.

    Raises:
        InvalidInputError: a collection is missing, not a sequence, empty or malformed.
        InvalidConfigurationError: the options or their strategies are invalid.
    """
    dataset = validate_dataset(data)
    report_options = resolve_options(options)

    ledger, product_index = build_indexes(dataset.sellers, dataset.products)
    summary = fold_purchase_records(
        dataset.purchase_records, ledger, product_index, report_options.calculate_revenue
    )
    logger.info(
        f"Folded {summary.records_applied} records ({summary.records_skipped} skipped), "
        f"{summary.items_applied} items ({summary.items_skipped} skipped)."
    )

    return rank_sellers(ledger.stats, report_options.calculate_bonus, top_limit)
