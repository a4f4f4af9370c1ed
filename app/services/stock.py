"""
Inventory side effects of purchases and sales.

Quantities move through single-document MongoDB updates (``$inc`` with a
``quantity >= n`` guard for decrements) so two requests for the same SKU
cannot both spend the same units.
"""
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from app.models.inventory import InventoryItem
from app.models.purchase import PurchaseItem
from app.models.sale import SaleItem

logger = logging.getLogger(__name__)


def quantities_by_sku(lines: Iterable) -> Dict[str, int]:
    """Sum line quantities per SKU, keeping first-seen order."""
    totals: Dict[str, int] = OrderedDict()
    for line in lines:
        totals[line.sku] = totals.get(line.sku, 0) + line.quantity
    return totals


def _collection():
    return InventoryItem.get_motor_collection()


# ==========================================
# PURCHASES (stock in)
# ==========================================

async def apply_purchase(items: List[PurchaseItem]) -> None:
    """Add purchased quantities to stock, creating unknown SKUs."""
    now = datetime.utcnow()

    for line in items:
        update = {"$inc": {"quantity": line.quantity}, "$set": {"updated_at": now}}
        if line.cost_price > 0:
            update["$set"]["unit_cost"] = line.cost_price

        result = await _collection().update_one({"sku": line.sku}, update)
        if result.matched_count:
            logger.info("Stock in: %s +%s", line.sku, line.quantity)
            continue

        new_item = InventoryItem(
            sku=line.sku,
            name=line.name or line.sku,
            quantity=line.quantity,
            unit_cost=line.cost_price,
            updated_at=now,
        )
        try:
            await new_item.insert()
        except DuplicateKeyError:
            # Created by a concurrent request since the update above
            await _collection().update_one({"sku": line.sku}, update)
            logger.info("Stock in: %s +%s", line.sku, line.quantity)
            continue
        logger.info("Created inventory item %s from purchase - Quantity: %s", line.sku, line.quantity)


async def reverse_purchase(items: List[PurchaseItem]) -> None:
    """Take a purchase back out of stock. Quantity never drops below zero."""
    now = datetime.utcnow()

    for sku, quantity in quantities_by_sku(items).items():
        result = await _collection().update_one(
            {"sku": sku, "quantity": {"$gte": quantity}},
            {"$inc": {"quantity": -quantity}, "$set": {"updated_at": now}},
        )
        if result.modified_count:
            continue

        clamped = await _collection().update_one(
            {"sku": sku},
            {"$set": {"quantity": 0, "updated_at": now}},
        )
        if clamped.matched_count:
            logger.warning("Reversing purchase of %s x%s left stock at 0 (units already sold)", sku, quantity)
        else:
            logger.warning("Reversing purchase: SKU %s no longer in inventory", sku)


# ==========================================
# SALES (stock out)
# ==========================================

async def _check_available(needed: Dict[str, int], held: Optional[Dict[str, int]] = None) -> None:
    """
    Reject if any SKU is unknown or short on stock.

    ``held`` is what the caller already has out of stock for the same SKUs
    (an edited sale), reported back as available.
    """
    held = held or {}
    for sku, quantity in needed.items():
        inventory = await InventoryItem.find_one(InventoryItem.sku == sku)

        if not inventory:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Product with SKU '{sku}' not found in inventory"
            )

        if inventory.quantity < quantity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"Insufficient stock for '{inventory.name or sku}'. "
                    f"Available: {inventory.quantity + held.get(sku, 0)}, "
                    f"Requested: {quantity + held.get(sku, 0)}"
                )
            )


async def check_stock(items: List[SaleItem]) -> None:
    """Reject the sale if any SKU is unknown or short on stock."""
    await _check_available(quantities_by_sku(items))


async def _take(quantities: Dict[str, int]) -> None:
    """
    Guarded decrements. If one loses a race with a concurrent sale, the SKUs
    already taken are put back and a 400 is raised.
    """
    now = datetime.utcnow()
    taken: Dict[str, int] = OrderedDict()

    for sku, quantity in quantities.items():
        result = await _collection().update_one(
            {"sku": sku, "quantity": {"$gte": quantity}},
            {"$inc": {"quantity": -quantity}, "$set": {"updated_at": now}},
        )
        if not result.modified_count:
            await _restore(taken)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Insufficient stock for '{sku}'. Requested: {quantity}"
            )

        taken[sku] = quantity
        logger.info("Stock out: %s -%s", sku, quantity)


async def reserve_sale(items: List[SaleItem]) -> None:
    """Take sold quantities out of stock, all lines or none."""
    await check_stock(items)
    await _take(quantities_by_sku(items))


async def adjust_sale(old_items: List[SaleItem], new_items: List[SaleItem]) -> None:
    """
    Move stock for an edited sale by the per-SKU difference only.

    SKUs that need more units are checked and taken first. Units no longer
    sold go back afterwards, so a rejected edit leaves stock as it was.
    """
    old = quantities_by_sku(old_items)
    new = quantities_by_sku(new_items)

    more: Dict[str, int] = OrderedDict()
    fewer: Dict[str, int] = OrderedDict()
    for sku in list(new) + [sku for sku in old if sku not in new]:
        delta = new.get(sku, 0) - old.get(sku, 0)
        if delta > 0:
            more[sku] = delta
        elif delta < 0:
            fewer[sku] = -delta

    await _check_available(more, held=old)
    await _take(more)

    for sku in await _restore(fewer):
        logger.warning("Editing sale: SKU %s no longer in inventory", sku)


async def release_sale(items: List[SaleItem]) -> None:
    """Return the quantities of a deleted sale to stock."""
    missing = await _restore(quantities_by_sku(items))
    for sku in missing:
        logger.warning("Releasing sale: SKU %s no longer in inventory", sku)


async def _restore(quantities: Dict[str, int]) -> List[str]:
    now = datetime.utcnow()
    missing = []
    for sku, quantity in quantities.items():
        result = await _collection().update_one(
            {"sku": sku},
            {"$inc": {"quantity": quantity}, "$set": {"updated_at": now}},
        )
        if not result.matched_count:
            missing.append(sku)
    return missing
