"""Checkout and the order lifecycle.

Statuses are pending, processing, completed and cancelled. Checkout writes
orders directly as completed because no settlement step exists; admins may
move any order to any status afterwards.
"""
import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import catalog
import models
import schemas
from errors import CheckoutFailed, NotFound, Unauthorized, ValidationError
from payments import PaymentGateway, resolve_gateway
from site_settings import SiteSettings

logger = logging.getLogger(__name__)


def checkout(
    db: Session,
    buyer: schemas.Identity,
    product_id: int,
    payment_method: str,
    transaction_id: Optional[str],
    settings: SiteSettings,
    gateway: Optional[PaymentGateway] = None,
) -> schemas.CheckoutResponse:
    """Record a completed order for ``buyer`` and hand back the download link.

    The order insert and the sales counter increment commit together or not
    at all. Price comes from the product row, never from the client.
    """
    if db.get(models.User, buyer.id) is None:
        raise Unauthorized("Unknown user")

    product = catalog.get_product(db, product_id, for_update=True)

    method = catalog.find_payment_method(db, payment_method)
    if method is not None and not method.active:
        db.rollback()
        raise ValidationError("Payment method is not available")

    if gateway is None:
        gateway = resolve_gateway(settings, method)
    try:
        reference = gateway.charge(product.price, payment_method, transaction_id)
    except ValidationError:
        db.rollback()
        raise

    amount = product.price
    download_url = product.file_url
    try:
        order = models.Order(
            user_id=buyer.id,
            product_id=product.id,
            amount=amount,
            status="completed",
            payment_method=payment_method,
            transaction_id=reference,
        )
        db.add(order)
        db.execute(
            update(models.Product)
            .where(models.Product.id == product.id)
            .values(sales_count=models.Product.sales_count + 1)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Checkout failed for user %s, product %s", buyer.id, product_id)
        raise CheckoutFailed()

    logger.info(
        "Order %s: user %s bought product %s for %.2f via %s (%s)",
        order.id, buyer.id, product_id, amount, payment_method, gateway.name,
    )
    return schemas.CheckoutResponse(order_id=order.id, download_url=download_url)


def get_order(db: Session, order_id: int) -> models.Order:
    order = db.query(models.Order).filter(models.Order.id == order_id).first()
    if not order:
        raise NotFound("Order not found")
    return order


def set_order_status(db: Session, order_id: int, status: str) -> models.Order:
    # any status may follow any other
    if status not in models.ORDER_STATUSES:
        raise ValidationError(f"Unknown order status: {status}")
    order = get_order(db, order_id)
    previous = order.status
    order.status = status
    db.commit()
    db.refresh(order)
    logger.info("Order %s status %s -> %s", order_id, previous, status)
    return order


def list_user_orders(db: Session, user_id: int) -> list[schemas.UserOrderResponse]:
    rows = (
        db.query(
            models.Order,
            models.Product.title,
            models.Product.thumbnail,
            models.Product.file_url,
        )
        .outerjoin(models.Product, models.Order.product_id == models.Product.id)
        .filter(models.Order.user_id == user_id)
        .order_by(models.Order.created_at.desc(), models.Order.id.desc())
        .all()
    )
    res = []
    for order, title, thumbnail, file_url in rows:
        item = schemas.UserOrderResponse.model_validate(order)
        item.title, item.thumbnail, item.file_url = title, thumbnail, file_url
        res.append(item)
    return res


def admin_orders_query(db: Session):
    return (
        db.query(
            models.Order,
            models.User.name.label("user_name"),
            models.User.email.label("user_email"),
            models.Product.title.label("product_title"),
        )
        .outerjoin(models.User, models.Order.user_id == models.User.id)
        .outerjoin(models.Product, models.Order.product_id == models.Product.id)
        .order_by(models.Order.created_at.desc(), models.Order.id.desc())
    )


def to_admin_order(row) -> schemas.AdminOrderResponse:
    order, user_name, user_email, product_title = row
    item = schemas.AdminOrderResponse.model_validate(order)
    item.user_name, item.user_email, item.product_title = user_name, user_email, product_title
    return item


def list_all_orders(db: Session) -> list[schemas.AdminOrderResponse]:
    return [to_admin_order(row) for row in admin_orders_query(db).all()]
