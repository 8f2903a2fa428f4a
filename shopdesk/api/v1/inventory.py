from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query

from shopdesk.api.v1.schemas import (
    InventoryMutationResponseSchema,
    ProductProfitSchema,
    ProductSchema,
    PurchaseRequestSchema,
    SaleRequestSchema,
    SalesSummarySchema,
    TransactionSchema,
)
from shopdesk.application.use_cases.inventory import (
    InventoryMutation,
    PurchaseLine,
    SaleLine,
    product_profit,
    sales_summary,
)
from shopdesk.application.use_cases.inventory_session import InventoryUseCase
from shopdesk.application.utils.date_parser import parse_booking_date
from shopdesk.wiring.dependencies import get_inventory_use_case, get_timezone

router = APIRouter()


def _mutation_response(uc: InventoryUseCase, mutation: InventoryMutation) -> InventoryMutationResponseSchema:
    touched = {item.barcode for item in mutation.transaction.items}
    products = [p for barcode, p in mutation.state.products.items() if barcode in touched]
    return InventoryMutationResponseSchema(
        transaction=TransactionSchema.from_entity(mutation.transaction),
        products=[ProductSchema.from_entity(p) for p in products],
        rejected_barcodes=list(mutation.rejected_barcodes),
        synced=uc.last_sync_ok,
    )


@router.get("/products", response_model=list[ProductSchema])
def list_products(uc: InventoryUseCase = Depends(get_inventory_use_case)):
    return [ProductSchema.from_entity(p) for p in uc.inventory.products.values()]


@router.get("/products/{barcode}", response_model=ProductSchema)
def get_product(barcode: str, uc: InventoryUseCase = Depends(get_inventory_use_case)):
    product = uc.inventory.products.get(barcode)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {barcode} not found.")
    return ProductSchema.from_entity(product)


@router.get("/transactions", response_model=list[TransactionSchema])
def list_transactions(uc: InventoryUseCase = Depends(get_inventory_use_case)):
    return [TransactionSchema.from_entity(tx) for tx in uc.inventory.transactions]


@router.post("/purchases", response_model=InventoryMutationResponseSchema, status_code=201)
def purchase(req: PurchaseRequestSchema, uc: InventoryUseCase = Depends(get_inventory_use_case)):
    lines = [
        PurchaseLine(barcode=l.barcode, name=l.name, quantity=l.quantity, unit_price=l.unit_price)
        for l in req.lines
    ]
    try:
        mutation = uc.purchase(lines, remarks=req.remarks, local_total=req.local_total)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _mutation_response(uc, mutation)


@router.post("/sales", response_model=InventoryMutationResponseSchema, status_code=201)
def sale(req: SaleRequestSchema, uc: InventoryUseCase = Depends(get_inventory_use_case)):
    lines = [SaleLine(barcode=l.barcode, quantity=l.quantity, unit_price=l.unit_price) for l in req.lines]
    try:
        mutation = uc.sale(lines, remarks=req.remarks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _mutation_response(uc, mutation)


@router.get("/profit", response_model=list[ProductProfitSchema])
def profit(uc: InventoryUseCase = Depends(get_inventory_use_case)):
    return [
        ProductProfitSchema(
            barcode=p.barcode,
            name=p.name,
            quantity_sold=p.quantity_sold,
            revenue=p.revenue,
            profit=p.profit,
        )
        for p in product_profit(uc.inventory.transactions)
    ]


@router.get("/sales-summary", response_model=SalesSummarySchema)
def summary(
    start: str = Query(...),
    end: str = Query(...),
    uc: InventoryUseCase = Depends(get_inventory_use_case),
    timezone: ZoneInfo = Depends(get_timezone),
):
    start_day = parse_booking_date(start)
    end_day = parse_booking_date(end)
    if start_day is None or end_day is None:
        raise HTTPException(status_code=400, detail="start and end must be YYYYMMDD or YYYY-MM-DD.")
    result = sales_summary(uc.inventory.transactions, start_day, end_day, timezone)
    return SalesSummarySchema(revenue=result.revenue, profit=result.profit, transaction_count=result.transaction_count)


@router.post("/reload")
def reload_inventory(uc: InventoryUseCase = Depends(get_inventory_use_case)) -> dict[str, bool]:
    return {"success": uc.load()}
