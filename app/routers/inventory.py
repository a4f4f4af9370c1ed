import re
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pymongo.errors import DuplicateKeyError
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from app.dependencies.auth import get_actor
from app.models.inventory import InventoryItem
from app.schemas.inventory import InventoryCreate, InventoryUpdate, InventoryResponse, InventorySummary
from app.services.activity import log_activity
from app.services.documents import send_report
from app.services.reports import inventory_report

router = APIRouter()

LOW_STOCK_THRESHOLD = 10


async def _get_item(item_id: UUID) -> InventoryItem:
    item = await InventoryItem.get(item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found"
        )
    return item


def _sku_conflict(sku: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Item with SKU '{sku}' already exists"
    )


async def _ensure_unique_sku(sku: str, exclude_id: Optional[UUID] = None) -> None:
    existing = await InventoryItem.find_one(InventoryItem.sku == sku)
    if existing and existing.id != exclude_id:
        raise _sku_conflict(sku)


# ==========================================
# 1. LIST & SUMMARY
# ==========================================

@router.get("", response_model=List[InventoryResponse])
async def list_inventory(search: Optional[str] = None):
    query = InventoryItem.find_all()

    if search:
        pattern = re.escape(search)
        query = InventoryItem.find(
            {"$or": [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"sku": {"$regex": pattern, "$options": "i"}},
                {"category": {"$regex": pattern, "$options": "i"}}
            ]}
        )

    return await query.sort(+InventoryItem.created_at).to_list()


@router.get("/summary", response_model=InventorySummary)
async def inventory_summary():
    """Totals for the dashboard cards."""
    items = await InventoryItem.find_all().to_list()

    total_value = sum(item.inventory_value for item in items)
    total_revenue = sum(item.potential_revenue for item in items)

    return {
        "total_items": len(items),
        "total_quantity": sum(item.quantity for item in items),
        "total_value": total_value,
        "total_revenue": total_revenue,
        "total_profit": total_revenue - total_value,
        "low_stock_items": sum(1 for item in items if item.quantity < LOW_STOCK_THRESHOLD),
    }


# ==========================================
# 2. REPORTS
# ==========================================

@router.get("/report")
async def inventory_report_xlsx(actor: str = Depends(get_actor)):
    items = await InventoryItem.find_all().to_list()
    return await send_report(inventory_report(items), "xlsx", actor)


@router.get("/report/pdf")
async def inventory_report_pdf(actor: str = Depends(get_actor)):
    items = await InventoryItem.find_all().to_list()
    return await send_report(inventory_report(items), "pdf", actor)


# ==========================================
# 3. CRUD
# ==========================================

@router.get("/{item_id}", response_model=InventoryResponse)
async def get_inventory_item(item_id: UUID):
    return await _get_item(item_id)


@router.post("", response_model=InventoryResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    data: InventoryCreate,
    actor: str = Depends(get_actor)
):
    await _ensure_unique_sku(data.sku)

    item = InventoryItem(**data.model_dump())
    try:
        await item.insert()
    except DuplicateKeyError:
        # Lost a race with a concurrent create of the same SKU
        raise _sku_conflict(data.sku)

    await log_activity(actor, f"Added: {item.name}")
    return item


@router.put("/{item_id}", response_model=InventoryResponse)
async def update_inventory_item(
    item_id: UUID,
    data: InventoryUpdate,
    actor: str = Depends(get_actor)
):
    item = await _get_item(item_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "sku" in changes and changes["sku"] != item.sku:
        await _ensure_unique_sku(changes["sku"], exclude_id=item.id)

    changes["updated_at"] = datetime.utcnow()
    try:
        await item.update({"$set": changes})
    except DuplicateKeyError:
        raise _sku_conflict(changes.get("sku", item.sku))

    item = await _get_item(item_id)
    await log_activity(actor, f"Updated: {item.name}")
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_inventory_item(
    item_id: UUID,
    actor: str = Depends(get_actor)
):
    item = await _get_item(item_id)
    await item.delete()

    await log_activity(actor, f"Deleted: {item.name}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
