from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr
from typing import Any, Dict, List, Optional, Union
from datetime import datetime


# --- QuoteData shape (used to check loaded quotes before adoption) ---

class ItemSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    item_id: str
    width: Optional[StrictInt] = None
    height: Optional[StrictInt] = None
    fabric_type: Optional[StrictStr] = None
    line_price: Optional[StrictFloat] = None


class SummarySchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_sum: StrictFloat = 0
    accessories: Dict[str, Any] = {}


class ProductQuoteSchema(BaseModel):
    items: List[ItemSchema]
    summary: SummarySchema


class UiMetadataSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    lf_modified_row_indexes: List[StrictInt] = []


class QuoteDataSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    current_product: str
    products: Dict[str, ProductQuoteSchema]
    ui_metadata: UiMetadataSchema
    cost_discount_percentage: StrictFloat = 0


# --- Request bodies ---

class ItemValueUpdate(BaseModel):
    column: str
    value: Optional[Union[int, str]] = None


class ItemPropertyUpdate(BaseModel):
    prop: str
    value: Any = None


class ItemTypeUpdate(BaseModel):
    fabric_type: str


class RowSelection(BaseModel):
    row_indexes: List[int]


class ModeRequest(BaseModel):
    mode: Optional[str] = None


class ConfirmRequest(BaseModel):
    confirm: bool = False


class ChainUpdate(BaseModel):
    value: Optional[Union[int, str]] = None


class DriveCountUpdate(BaseModel):
    count: int
    confirm: bool = False


class RemoteDistribution(BaseModel):
    qty_1ch: Any = None
    qty_16ch: Any = None


class DualDistribution(BaseModel):
    combo_qty: Any = None
    slim_qty: Any = None


class DiscountUpdate(BaseModel):
    percentage: float


class F2ValueUpdate(BaseModel):
    key: str
    value: Any = None


# --- Saved quotes ---

class SavedQuoteCreate(BaseModel):
    name: str


class SavedQuoteSummary(BaseModel):
    id: int
    name: str
    product: str
    total_sum: float
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SavedQuote(SavedQuoteSummary):
    quote_json: Dict[str, Any]
