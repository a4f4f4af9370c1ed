from fastapi import APIRouter, HTTPException, Depends, Response, status
from datetime import datetime
from uuid import UUID
from typing import List, Optional

from app.models.purchase import Purchase, PurchaseItem
from app.schemas.purchase import PurchaseCreate, PurchaseUpdate, PurchaseItemInput, PurchaseResponse
from app.dependencies.auth import get_actor
from app.services.activity import log_activity
from app.services.documents import send_report
from app.services.numbering import generate_reference
from app.services.reports import purchases_report
from app.services import stock

router = APIRouter()


def build_items(lines: List[PurchaseItemInput]) -> List[PurchaseItem]:
    """Subtotals are always computed here, never taken from the client."""
    return [
        PurchaseItem(
            sku=line.sku,
            name=line.name,
            quantity=line.quantity,
            cost_price=line.cost_price,
            subtotal=line.quantity * line.cost_price
        )
        for line in lines
    ]


async def _get_purchase(purchase_id: UUID) -> Purchase:
    purchase = await Purchase.get(purchase_id)
    if not purchase:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Purchase not found"
        )
    return purchase


# ==========================================
# 1. RECORD PURCHASE (UPDATES INVENTORY)
# ==========================================
@router.post("", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase(
    data: PurchaseCreate,
    actor: str = Depends(get_actor)
):
    """
    Record goods bought from a supplier.

    Every line adds its quantity to the inventory item with the same SKU and,
    when a cost price is given, becomes that item's new unit cost. Unknown
    SKUs are added to inventory.
    """
    items = build_items(data.items)

    purchase = Purchase(
        purchase_id=generate_reference("PUR"),
        date=data.date or datetime.utcnow(),
        supplier=data.supplier,
        items=items,
        grand_total=sum(item.subtotal for item in items),
        notes=data.notes,
        created_by=actor
    )

    await stock.apply_purchase(items)
    await purchase.insert()

    await log_activity(actor, f"Recorded purchase {purchase.purchase_id} from {purchase.supplier or 'N/A'}")
    return purchase


# ==========================================
# 2. LIST & GET
# ==========================================
@router.get("", response_model=List[PurchaseResponse])
async def list_purchases(
    supplier: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None
):
    filters = {}
    if supplier:
        filters["supplier"] = supplier
    if start_date or end_date:
        filters["date"] = {}
        if start_date:
            filters["date"]["$gte"] = start_date
        if end_date:
            filters["date"]["$lte"] = end_date

    return await Purchase.find(filters).sort(-Purchase.date).to_list()


@router.get("/report")
async def purchases_report_xlsx(actor: str = Depends(get_actor)):
    purchases = await Purchase.find_all().sort(+Purchase.date).to_list()
    return await send_report(purchases_report(purchases), "xlsx", actor)


@router.get("/report/pdf")
async def purchases_report_pdf(actor: str = Depends(get_actor)):
    purchases = await Purchase.find_all().sort(+Purchase.date).to_list()
    return await send_report(purchases_report(purchases), "pdf", actor)


@router.get("/{purchase_id}", response_model=PurchaseResponse)
async def get_purchase(purchase_id: UUID):
    return await _get_purchase(purchase_id)


# ==========================================
# 3. UPDATE (RE-APPLIES STOCK)
# ==========================================
@router.put("/{purchase_id}", response_model=PurchaseResponse)
async def update_purchase(
    purchase_id: UUID,
    data: PurchaseUpdate,
    actor: str = Depends(get_actor)
):
    purchase = await _get_purchase(purchase_id)

    if data.items is not None:
        new_items = build_items(data.items)
        await stock.reverse_purchase(purchase.items)
        await stock.apply_purchase(new_items)
        purchase.items = new_items
        purchase.grand_total = sum(item.subtotal for item in new_items)

    if data.supplier is not None:
        purchase.supplier = data.supplier
    if data.date is not None:
        purchase.date = data.date
    if data.notes is not None:
        purchase.notes = data.notes

    purchase.updated_at = datetime.utcnow()
    await purchase.save()

    await log_activity(actor, f"Updated purchase {purchase.purchase_id}")
    return purchase


# ==========================================
# 4. DELETE (REVERSES STOCK)
# ==========================================
@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_purchase(
    purchase_id: UUID,
    actor: str = Depends(get_actor)
):
    purchase = await _get_purchase(purchase_id)

    await stock.reverse_purchase(purchase.items)
    await purchase.delete()

    await log_activity(actor, f"Deleted purchase {purchase.purchase_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
