import logging
from fastapi import APIRouter, HTTPException, status
from restaurant.core.errors import ServiceError
from restaurant.schemas.response import SuccessResponse, MessageResponse
from restaurant.services.order_service import place_order, get_order_by_id, list_orders, update_order_status, delete_order
from restaurant.models.menu import MenuItem
from restaurant.models.order import Order, OrderStatus
from restaurant.models.table import Table
from restaurant.schemas.order import (
    OrderRequest,
    OrderPlacementResponse,
    OrderStatusUpdate,
    OrderDetailResponse,
    OrderItemResponse,
    OrderMenuItemSummary,
    OrderTableSummary,
)
from typing import Optional
from uuid import UUID

router = APIRouter()
log = logging.getLogger("uvicorn")


def _order_detail(order: Order) -> dict:
    """Flattens an order with prefetched table and line items into the response payload."""
    table = order.table if isinstance(order.table, Table) else None
    items = []
    for line in sorted(order.items, key=lambda i: i.position):
        menu = line.menu_item if isinstance(line.menu_item, MenuItem) else None
        items.append(OrderItemResponse(
            menu_item=OrderMenuItemSummary(
                id=menu.id, name=menu.name, price=menu.price, category=menu.category
            ) if menu else None,
            quantity=line.quantity,
            price_at_order=line.price_at_order,
            line_total=line.line_total,
        ))
    return OrderDetailResponse(
        id=order.id,
        table=OrderTableSummary(
            id=table.id, table_number=table.table_number, capacity=table.capacity
        ) if table else None,
        items=items,
        total_amount=order.total_amount,
        status=order.status,
        order_time=order.order_time,
        completion_time=order.completion_time,
    ).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest):
    """
    Places a new order. Validates the table and every item, snapshots prices and decrements stock.
    """
    try:
        items_data = [
            {
                "menu_item_id": item.menu_item_id,
                "quantity": item.quantity
            }
            for item in request_data.items
        ]
        order = await place_order(table_id=request_data.table_id, items=items_data)
        return SuccessResponse(data=_order_detail(order))
    except ServiceError as e:
        log.error(f"Rejected order: {e}")
        raise
    except Exception as e:
        log.exception(f"Error placing order: {e}")
        raise HTTPException(status_code=500, detail="Server failed to place order.")


@router.get("/", response_model=SuccessResponse)
async def list_orders_endpoint(status: Optional[OrderStatus] = None):
    """Lists orders, optionally filtered by status, with table and menu items populated."""
    try:
        orders = await list_orders(status=status)
        return SuccessResponse(data=[_order_detail(order) for order in orders])
    except Exception as e:
        log.exception(f"Error listing orders: {e}")
        raise HTTPException(status_code=500, detail="Server failed to list orders.")


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: UUID):
    """Fetches details for a specific order."""
    try:
        order = await get_order_by_id(order_id)
    except Exception as e:
        log.exception(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch order details.")
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return SuccessResponse(data=_order_detail(order))


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(order_id: UUID, payload: OrderStatusUpdate):
    """
    Updates status ('preparing', 'completed', 'cancelled'). Cancelling restocks inventory.
    """
    try:
        order = await update_order_status(order_id, payload.status)
        data = OrderPlacementResponse(
            order_id=order.id,
            status=order.status,
            total_amount=order.total_amount,
            completion_time=order.completion_time,
            message=f"Order status successfully updated to {order.status.value}"
        ).model_dump(mode="json")
        return SuccessResponse(data=data)
    except ServiceError as e:
        log.error(f"Rejected order status update: {e}")
        raise
    except Exception as e:
        log.exception(f"Error updating order status: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update order status.")


@router.delete("/{order_id}", response_model=SuccessResponse)
async def delete_order_endpoint(order_id: UUID):
    """Hard delete. Does not return stock; cancel the order first for that."""
    try:
        await delete_order(order_id)
        return SuccessResponse(data=MessageResponse(message="Order removed").model_dump())
    except ServiceError:
        raise
    except Exception as e:
        log.exception(f"Error deleting order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to delete order.")
