from __future__ import annotations

from pydantic import BaseModel, Field

from shopdesk.domain.entities.booking import Booking, BookingStatus
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.transaction import Transaction, TransactionType
from shopdesk.domain.entities.user import User


class UserSchema(BaseModel):
    phone: str
    name: str
    sheet_url: str | None = None
    sheet_id: str | None = None

    @classmethod
    def from_entity(cls, user: User) -> "UserSchema":
        return cls(phone=user.phone, name=user.name, sheet_url=user.sheet_url, sheet_id=user.sheet_id)


class CheckUserRequestSchema(BaseModel):
    phone: str


class AvailabilitySchema(BaseModel):
    is_available: bool
    message: str
    error: bool = False


class LoginRequestSchema(BaseModel):
    phone: str
    password: str


class RegisterRequestSchema(BaseModel):
    phone: str
    password: str
    confirm_password: str
    name: str


class ChangePasswordRequestSchema(BaseModel):
    old_password: str
    new_password: str
    confirm_password: str


class AuthResponseSchema(BaseModel):
    success: bool
    message: str = ""
    user: UserSchema | None = None


class ShopSettingsSchema(BaseModel):
    service_durations: dict[str, int]
    product_sales_enabled: bool = True


class ServiceSchema(BaseModel):
    name: str
    duration_minutes: int


class CustomerCreateSchema(BaseModel):
    phone: str
    name: str
    birth_month: int | None = None
    birth_day: int | None = None
    notes: str = ""


class CustomerUpdateSchema(BaseModel):
    name: str | None = None
    birthday: str | None = None
    notes: str | None = None


class CustomerSchema(BaseModel):
    id: str
    phone: str
    name: str
    birthday: str = ""
    notes: str = ""
    stats_visits: int = 0
    stats_amount: float = 0
    stats_cancel: int = 0
    stats_no_show: int = 0
    stats_modify: int = 0
    created_at_ms: int = 0

    @classmethod
    def from_entity(cls, c: Customer) -> "CustomerSchema":
        return cls(
            id=c.id,
            phone=c.phone,
            name=c.name,
            birthday=c.birthday,
            notes=c.notes,
            stats_visits=c.stats_visits,
            stats_amount=c.stats_amount,
            stats_cancel=c.stats_cancel,
            stats_no_show=c.stats_no_show,
            stats_modify=c.stats_modify,
            created_at_ms=c.created_at_ms,
        )


class BookingCreateSchema(BaseModel):
    customer_id: str
    date: str
    start_time: str
    services: list[str] = Field(default_factory=list)
    notes: str = ""


class BookingModifySchema(BaseModel):
    date: str
    start_time: str
    services: list[str] = Field(default_factory=list)
    notes: str | None = None


class CheckoutSchema(BaseModel):
    amount: float | str | None = None
    product_amount: float | str | None = None
    checkout_notes: str = ""


class BookingSchema(BaseModel):
    id: str
    customer_id: str
    customer_name: str
    date: str
    start_time: str
    end_time: str
    start_ms: int
    end_ms: int
    services: list[str]
    notes: str = ""
    status: BookingStatus
    created_at_ms: int
    amount: float | None = None
    product_amount: float | None = None
    checkout_notes: str | None = None

    @classmethod
    def from_entity(cls, b: Booking) -> "BookingSchema":
        return cls(
            id=b.id,
            customer_id=b.customer_id,
            customer_name=b.customer_name,
            date=b.date,
            start_time=b.start_time,
            end_time=b.end_time,
            start_ms=b.start_ms,
            end_ms=b.end_ms,
            services=list(b.services),
            notes=b.notes,
            status=b.status,
            created_at_ms=b.created_at_ms,
            amount=b.amount,
            product_amount=b.product_amount,
            checkout_notes=b.checkout_notes,
        )


class BookingMutationResponseSchema(BaseModel):
    booking: BookingSchema
    customer: CustomerSchema | None = None
    synced: bool | None = None


class RevenueSchema(BaseModel):
    today: float
    week: float
    month: float
    range: float | None = None


class ServiceShareSchema(BaseModel):
    name: str
    value: float
    percent: int


class ServiceMixSchema(BaseModel):
    shares: list[ServiceShareSchema]
    chart: dict[str, int]


class ProductSchema(BaseModel):
    barcode: str
    name: str
    quantity: int
    weighted_average_cost: float
    last_updated: str = ""

    @classmethod
    def from_entity(cls, p: Product) -> "ProductSchema":
        return cls(
            barcode=p.barcode,
            name=p.name,
            quantity=p.quantity,
            weighted_average_cost=p.weighted_average_cost,
            last_updated=p.last_updated,
        )


class LineItemSchema(BaseModel):
    barcode: str
    name: str
    quantity: int
    unit_price: float
    cost_at_sale: float | None = None
    profit: float | None = None


class TransactionSchema(BaseModel):
    id: str
    date: str
    type: TransactionType
    items: list[LineItemSchema]
    total_amount: float
    total_profit: float | None = None
    remarks: str = ""

    @classmethod
    def from_entity(cls, tx: Transaction) -> "TransactionSchema":
        return cls(
            id=tx.id,
            date=tx.date,
            type=tx.type,
            items=[
                LineItemSchema(
                    barcode=i.barcode,
                    name=i.name,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                    cost_at_sale=i.cost_at_sale,
                    profit=i.profit,
                )
                for i in tx.items
            ],
            total_amount=tx.total_amount,
            total_profit=tx.total_profit,
            remarks=tx.remarks,
        )


class PurchaseLineSchema(BaseModel):
    barcode: str
    name: str = ""
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)


class PurchaseRequestSchema(BaseModel):
    lines: list[PurchaseLineSchema] = Field(min_length=1)
    remarks: str = ""
    local_total: float | None = None


class SaleLineSchema(BaseModel):
    barcode: str
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)


class SaleRequestSchema(BaseModel):
    lines: list[SaleLineSchema] = Field(min_length=1)
    remarks: str = ""


class InventoryMutationResponseSchema(BaseModel):
    transaction: TransactionSchema
    products: list[ProductSchema]
    rejected_barcodes: list[str] = Field(default_factory=list)
    synced: bool | None = None


class ProductProfitSchema(BaseModel):
    barcode: str
    name: str
    quantity_sold: int
    revenue: float
    profit: float


class SalesSummarySchema(BaseModel):
    revenue: float
    profit: float
    transaction_count: int


class ExpandRequestSchema(BaseModel):
    seed: str


class KeyInsightSchema(BaseModel):
    label: str
    value: float


class GraphNodeSchema(BaseModel):
    id: str
    group: int


class GraphLinkSchema(BaseModel):
    source: str
    target: str


class ExpandResponseSchema(BaseModel):
    title: str
    summary: str
    narrative: str
    key_insights: list[KeyInsightSchema]
    nodes: list[GraphNodeSchema]
    links: list[GraphLinkSchema]
    image_prompt: str


class ImageRequestSchema(BaseModel):
    prompt: str


class ImageResponseSchema(BaseModel):
    data_url: str


class SpeechRequestSchema(BaseModel):
    text: str


class SpeechResponseSchema(BaseModel):
    audio_base64: str


class ServiceToggleSchema(BaseModel):
    selected: list[str] = Field(default_factory=list)
    service: str


class ServiceSelectionSchema(BaseModel):
    selected: list[str]
    total_minutes: int


class PasswordRulesRequestSchema(BaseModel):
    password: str


class PasswordRulesSchema(BaseModel):
    length: bool
    upper: bool
    lower: bool
    digit_or_symbol: bool
    valid: bool
