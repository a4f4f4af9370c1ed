from fastapi import APIRouter, HTTPException, Depends, Query, Response, status
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.order import Order, OrderItem, OrderStatus
from app.schemas.order import OrderCreate, OrderUpdate, OrderStatusUpdate, OrderItemInput, OrderResponse
from app.dependencies.auth import get_actor
from app.services.activity import log_activity
from app.services.documents import send_report
from app.services.numbering import generate_reference
from app.services.reports import orders_report

router = APIRouter()


def build_items(lines: List[OrderItemInput]) -> List[OrderItem]:
    return [OrderItem(**line.model_dump()) for line in lines]


def order_total(items: List[OrderItem]) -> float:
    return sum(item.qty * item.price for item in items)


async def _get_order(order_id: UUID) -> Order:
    order = await Order.get(order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return order


# ==========================================
# 1. CREATE ORDER
# ==========================================
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    actor: str = Depends(get_actor)
):
    """Customer orders are tracked only; they do not move stock."""
    items = build_items(data.items)

    order = Order(
        order_number=generate_reference("ORD"),
        customer_name=data.customer_name,
        items=items,
        total=order_total(items),
        status=data.status,
        date=data.date or datetime.utcnow()
    )
    await order.insert()

    await log_activity(actor, f"Created order {order.order_number} for {order.customer_name}")
    return order


# ==========================================
# 2. LIST & GET
# ==========================================
@router.get("", response_model=List[OrderResponse])
async def list_orders(status_filter: Optional[OrderStatus] = Query(default=None, alias="status")):
    query = Order.find_all()
    if status_filter:
        query = Order.find(Order.status == status_filter)
    return await query.sort(-Order.date).to_list()


@router.get("/report")
async def orders_report_xlsx(actor: str = Depends(get_actor)):
    orders = await Order.find_all().sort(+Order.date).to_list()
    return await send_report(orders_report(orders), "xlsx", actor)


@router.get("/report/pdf")
async def orders_report_pdf(actor: str = Depends(get_actor)):
    orders = await Order.find_all().sort(+Order.date).to_list()
    return await send_report(orders_report(orders), "pdf", actor)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: UUID):
    return await _get_order(order_id)


# ==========================================
# 3. UPDATE & STATUS
# ==========================================
@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: UUID,
    data: OrderUpdate,
    actor: str = Depends(get_actor)
):
    order = await _get_order(order_id)

    if data.items is not None:
        order.items = build_items(data.items)
        order.total = order_total(order.items)
    if data.customer_name is not None:
        order.customer_name = data.customer_name
    if data.status is not None:
        order.status = data.status
    if data.date is not None:
        order.date = data.date

    order.updated_at = datetime.utcnow()
    await order.save()

    await log_activity(actor, f"Updated order {order.order_number}")
    return order


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    actor: str = Depends(get_actor)
):
    order = await _get_order(order_id)

    order.status = data.status
    order.updated_at = datetime.utcnow()
    await order.save()

    await log_activity(actor, f"Order {order.order_number} marked {order.status.value}")
    return order


# ==========================================
# 4. DELETE
# ==========================================
@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_order(
    order_id: UUID,
    actor: str = Depends(get_actor)
):
    order = await _get_order(order_id)
    await order.delete()

    await log_activity(actor, f"Deleted order {order.order_number}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
