from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select
from typing import List
from epharmacy.api.deps import get_db, get_current_user, admin_required
from epharmacy.models.user import User, UserRole
from epharmacy.models.order import Order
from epharmacy.schemas.order import (
    OrderCreate, OrderCreatedResponse, OrderListItem, OrderResponse, OrderStatusUpdate, TopProduct
)
from epharmacy.services.orders import (
    create_order, update_order_status, build_order_list_item, build_order_response, top_products
)

router = APIRouter(prefix="/api/orders", tags=["orders"])


# === Admin: список заказов ===

@router.get("/", response_model=List[OrderListItem])
def list_orders(
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    orders = db.exec(select(Order).order_by(Order.order_date.desc())).all()
    return [build_order_list_item(o) for o in orders]


@router.get("/top-products", response_model=List[TopProduct])
def get_top_products(
    count: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    """Топ товаров по количеству проданных единиц"""
    return top_products(db, count)


# === Customer: мои заказы ===

@router.get("/my-orders", response_model=List[OrderListItem])
def get_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    stmt = select(Order).where(Order.user_id == current_user.id).order_by(Order.order_date.desc())
    orders = db.exec(stmt).all()
    return [build_order_list_item(o) for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Детали заказа: админ или владелец"""
    order = db.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    
    if current_user.role != UserRole.ADMINISTRATOR and order.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    
    return build_order_response(order)


@router.post("/", response_model=OrderCreatedResponse)
def create_new_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Оформить заказ (только покупатель)"""
    order = create_order(db, data, current_user)
    return OrderCreatedResponse(id=order.id, total_price=order.total_price, status=order.status)


# === Admin: управление ===

@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    order = db.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    
    order = update_order_status(db, order, data.status)
    return build_order_response(order)


@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    order = db.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    
    db.delete(order)
    db.commit()
    return {"message": "Order deleted"}
