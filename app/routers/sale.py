from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.sale import Sale, SaleItem, PaymentMethod
from app.models.inventory import InventoryItem
from app.schemas.sale import SaleCreate, SaleUpdate, SaleItemInput, SaleResponse
from app.dependencies.auth import get_actor
from app.services.activity import log_activity
from app.services.documents import send_report
from app.services.numbering import generate_reference
from app.services.reports import sales_report
from app.services import stock

router = APIRouter()


# ==========================================
# HELPER FUNCTIONS
# ==========================================

def build_items(lines: List[SaleItemInput]) -> List[SaleItem]:
    return [
        SaleItem(
            sku=line.sku,
            name=line.name,
            quantity=line.quantity,
            selling_price=line.selling_price,
            subtotal=line.quantity * line.selling_price
        )
        for line in lines
    ]


def to_response(sale: Sale) -> SaleResponse:
    # invoice is a property, so validate from attributes
    return SaleResponse.model_validate(sale, from_attributes=True)


async def _get_sale(sale_id: UUID) -> Sale:
    sale = await Sale.get(sale_id)
    if not sale:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sale not found"
        )
    return sale


async def _unit_costs() -> dict:
    items = await InventoryItem.find_all().to_list()
    return {item.sku: item.unit_cost for item in items}


# ==========================================
# 1. CREATE SALE (DEDUCTS INVENTORY)
# ==========================================
@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    data: SaleCreate,
    actor: str = Depends(get_actor)
):
    """
    Record a sale.

    Flow:
    1. Check every SKU exists with enough stock
    2. Deduct the quantities (all or nothing)
    3. Save the sale with server-computed totals
    """
    items = build_items(data.items)

    await stock.reserve_sale(items)

    sale = Sale(
        sale_id=generate_reference("INV"),
        date=data.date or datetime.utcnow(),
        customer=data.customer,
        items=items,
        grand_total=sum(item.subtotal for item in items),
        payment_method=data.payment_method,
        notes=data.notes,
        created_by=actor
    )

    try:
        await sale.insert()
    except Exception:
        await stock.release_sale(items)
        raise

    await log_activity(actor, f"Recorded sale {sale.sale_id} to {sale.customer or 'Walk-in'}")
    return to_response(sale)


# ==========================================
# 2. LIST & GET
# ==========================================
@router.get("", response_model=List[SaleResponse])
async def list_sales(
    customer: Optional[str] = None,
    payment_method: Optional[PaymentMethod] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None
):
    filters = {}
    if customer:
        filters["customer"] = customer
    if payment_method:
        filters["payment_method"] = payment_method.value
    if start_date or end_date:
        filters["date"] = {}
        if start_date:
            filters["date"]["$gte"] = start_date
        if end_date:
            filters["date"]["$lte"] = end_date

    sales = await Sale.find(filters).sort(-Sale.date).to_list()
    return [to_response(sale) for sale in sales]


@router.get("/report")
async def sales_report_xlsx(actor: str = Depends(get_actor)):
    sales = await Sale.find_all().sort(+Sale.date).to_list()
    return await send_report(sales_report(sales, await _unit_costs()), "xlsx", actor)


@router.get("/report/pdf")
async def sales_report_pdf(actor: str = Depends(get_actor)):
    sales = await Sale.find_all().sort(+Sale.date).to_list()
    return await send_report(sales_report(sales, await _unit_costs()), "pdf", actor)


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(sale_id: UUID):
    return to_response(await _get_sale(sale_id))


# ==========================================
# 3. UPDATE SALE
# ==========================================
@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: UUID,
    data: SaleUpdate,
    actor: str = Depends(get_actor)
):
    """Editing the items moves only the difference between old and new quantities."""
    sale = await _get_sale(sale_id)

    if data.items is not None:
        new_items = build_items(data.items)

        await stock.adjust_sale(sale.items, new_items)

        sale.items = new_items
        sale.grand_total = sum(item.subtotal for item in new_items)

    if data.customer is not None:
        sale.customer = data.customer
    if data.date is not None:
        sale.date = data.date
    if data.payment_method is not None:
        sale.payment_method = data.payment_method
    if data.notes is not None:
        sale.notes = data.notes

    sale.updated_at = datetime.utcnow()
    await sale.save()

    await log_activity(actor, f"Updated sale {sale.sale_id}")
    return to_response(sale)


# ==========================================
# 4. DELETE SALE (RESTORES INVENTORY)
# ==========================================
@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_sale(
    sale_id: UUID,
    actor: str = Depends(get_actor)
):
    sale = await _get_sale(sale_id)

    await stock.release_sale(sale.items)
    await sale.delete()

    await log_activity(actor, f"Deleted sale {sale.sale_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
