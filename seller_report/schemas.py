from typing import Annotated, Any, Callable, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .utils import to_number

# Numeric input field: missing or garbage values are stored as 0 once, here.
Number = Annotated[Union[int, float], BeforeValidator(to_number)]


def _to_text(value: Any) -> Any:
    # Identifiers arrive as ints or strings depending on the export
    if value is None or isinstance(value, str):
        return value
    return str(value)


Identifier = Annotated[str, BeforeValidator(_to_text)]
OptionalIdentifier = Annotated[Optional[str], BeforeValidator(_to_text)]
Text = Annotated[str, BeforeValidator(lambda value: "" if value is None else str(value))]


class Seller(BaseModel):
    """A seller from the input dataset."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Identifier
    first_name: Text = ""
    last_name: Text = ""
    start_date: Optional[str] = None
    position: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Product(BaseModel):
    """A catalog card. `purchase_price` is the cost basis used for profit."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sku: Identifier
    purchase_price: Number = 0
    sale_price: Number = 0
    name: Optional[str] = None
    category: Optional[str] = None


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    sku: OptionalIdentifier = None
    quantity: Number = 0
    sale_price: Number = 0
    discount: Number = 0  # percent, 0-100


class PurchaseRecord(BaseModel):
    """
    One receipt. `total_amount` feeds the seller's revenue directly; the
    line items feed profit and the products-sold tally.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    seller_id: OptionalIdentifier = None
    total_amount: Number = 0
    items: list[LineItem] = Field(default_factory=list)
    receipt_id: OptionalIdentifier = None
    date: Optional[str] = None
    customer_id: OptionalIdentifier = None
    total_discount: Number = 0


class SalesDataset(BaseModel):
    """The three collections the report is built from."""

    model_config = ConfigDict(frozen=True)

    sellers: list[Seller]
    products: list[Product]
    purchase_records: list[PurchaseRecord]


class ReportOptions(BaseModel):
    """
    The two pluggable policies of the report.
    Accepts snake_case field names or their camelCase aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    calculate_revenue: Callable[..., Any] = Field(..., alias="calculateRevenue")
    calculate_bonus: Callable[..., Any] = Field(..., alias="calculateBonus")


class TopProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    sku: str
    quantity: Union[int, float]


class ReportEntry(BaseModel):
    """
    Defines the data contract for a single row of the final seller report.
    Money fields are already rounded to 2 decimals.
    """

    model_config = ConfigDict(frozen=True)

    seller_id: str
    name: str
    revenue: float
    profit: float
    sales_count: int = Field(default=0, ge=0)
    top_products: list[TopProduct] = Field(default_factory=list)
    bonus: float
