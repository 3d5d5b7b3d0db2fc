import logging
from decimal import Decimal
from typing import List
from datetime import datetime, timezone
from sqlmodel import Session, select, func
from epharmacy.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from epharmacy.models.order import Order, OrderItem, OrderStatus
from epharmacy.models.product import Product
from epharmacy.models.user import User, UserRole
from epharmacy.schemas.order import OrderCreate, OrderItemResponse, OrderListItem, OrderResponse, TopProduct

logger = logging.getLogger(__name__)


def create_order(db: Session, data: OrderCreate, user: User) -> Order:
    """Создание заказа с простым списанием остатков"""
    if user.role == UserRole.ADMINISTRATOR:
        raise ForbiddenError("Administrators cannot place orders")
    
    if not data.items:
        raise BadRequestError("At least one item is required.")
    
    # Один товар может встречаться в нескольких строках: остаток проверяем по сумме
    requested = {}
    for item_data in data.items:
        if item_data.quantity <= 0:
            raise BadRequestError("Quantity must be greater than zero.")
        requested[item_data.product_id] = requested.get(item_data.product_id, 0) + item_data.quantity
    
    # Сначала проверяем все позиции, потом списываем
    products = {}
    for product_id, quantity in requested.items():
        product = db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        
        if product.is_prescription_required:
            raise BadRequestError("Prescription products cannot be ordered online.")
        
        if product.available_quantity < quantity:
            raise BadRequestError(
                f"Insufficient stock for {product.name}. Available: {product.available_quantity}"
            )
        
        products[product_id] = product
    
    total = Decimal("0")
    order_items = []
    for item_data in data.items:
        product = products[item_data.product_id]
        total += product.price * item_data.quantity
        order_items.append(
            OrderItem(product_id=product.id, quantity=item_data.quantity, unit_price=product.price)
        )
    
    for product_id, quantity in requested.items():
        products[product_id].available_quantity -= quantity
        db.add(products[product_id])
    
    order = Order(
        user_id=user.id,
        order_date=datetime.now(timezone.utc),
        status=OrderStatus.PENDING,
        total_price=total,
        delivery_address=data.delivery_address,
        city=data.city,
        province=data.province,
        postal_code=data.postal_code,
        phone_number=data.phone_number,
        items=order_items,
    )
    
    db.add(order)
    db.commit()
    db.refresh(order)
    
    logger.info(f"Order {order.id} created for user {user.id}: {len(order_items)} items, total {total}")
    return order


def update_order_status(db: Session, order: Order, new_status: OrderStatus) -> Order:
    """
    Смена статуса. Отмена возвращает товар на склад,
    снятие отмены снова списывает (если хватает остатков).
    """
    old_status = order.status
    
    if new_status == OrderStatus.CANCELLED and old_status != OrderStatus.CANCELLED:
        for item in order.items:
            if item.product:
                item.product.available_quantity += item.quantity
                db.add(item.product)
    
    elif old_status == OrderStatus.CANCELLED and new_status != OrderStatus.CANCELLED:
        needed = {}
        for item in order.items:
            if item.product:
                product, quantity = needed.get(item.product_id, (item.product, 0))
                needed[item.product_id] = (product, quantity + item.quantity)
        
        for product, quantity in needed.values():
            if product.available_quantity < quantity:
                raise BadRequestError(
                    f"Insufficient stock for {product.name} to restore this order. "
                    f"Available: {product.available_quantity}"
                )
        for product, quantity in needed.values():
            product.available_quantity -= quantity
            db.add(product)
    
    order.status = new_status
    db.add(order)
    db.commit()
    db.refresh(order)
    
    logger.info(f"Order {order.id} status: {old_status.value} -> {new_status.value}")
    return order


def build_order_list_item(order: Order) -> OrderListItem:
    user = order.user
    return OrderListItem(
        id=order.id,
        user_id=order.user_id,
        user_name=f"{user.first_name} {user.last_name}".strip() if user else "",
        user_username=user.username if user else "",
        order_date=order.order_date,
        status=order.status,
        total_price=order.total_price,
        item_count=len(order.items),
        city=order.city,
        province=order.province,
    )


def build_order_response(order: Order) -> OrderResponse:
    items = [
        OrderItemResponse(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product.name if item.product else "Unknown",
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.unit_price * item.quantity,
        )
        for item in order.items
    ]
    
    return OrderResponse(
        **build_order_list_item(order).model_dump(),
        delivery_address=order.delivery_address,
        postal_code=order.postal_code,
        phone_number=order.phone_number,
        items=items,
    )


def top_products(db: Session, count: int = 5) -> List[TopProduct]:
    """Самые продаваемые товары по количеству проданных единиц"""
    total_quantity = func.sum(OrderItem.quantity)
    stmt = (
        select(
            OrderItem.product_id,
            Product.name,
            func.count(OrderItem.id),
            total_quantity,
            func.sum(OrderItem.quantity * OrderItem.unit_price),
        )
        .join(Product, Product.id == OrderItem.product_id, isouter=True)
        .group_by(OrderItem.product_id, Product.name)
        .order_by(total_quantity.desc(), OrderItem.product_id)
        .limit(count)
    )
    
    return [
        TopProduct(
            product_id=product_id,
            product_name=name or "Unknown",
            order_count=order_count,
            total_quantity=int(quantity),
            total_revenue=Decimal(str(revenue or 0)).quantize(Decimal("0.01")),
        )
        for product_id, name, order_count, quantity, revenue in db.exec(stmt).all()
    ]
