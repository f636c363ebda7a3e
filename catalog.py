"""Catalog reads plus the admin-side table maintenance around them.

Product reads always outer-join the category so a product whose category
was removed still lists, with ``category_name`` left empty.
"""
import logging
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
import models
import schemas
from errors import Conflict, NotFound, ProductNotFound

logger = logging.getLogger(__name__)


def _product_query(db: Session):
    return (
        db.query(models.Product, models.Category.name.label("category_name"))
        .outerjoin(models.Category, models.Product.category_id == models.Category.id)
    )


def _to_response(product: models.Product, category_name: Optional[str]) -> schemas.ProductResponse:
    response = schemas.ProductResponse.model_validate(product)
    response.category_name = category_name
    return response


# --------------------------- Products ---------------------------
def list_products(db: Session, category: Optional[str] = None) -> Iterator[schemas.ProductResponse]:
    # filters on the category display name, not the slug
    q = _product_query(db)
    if category:
        q = q.filter(models.Category.name == category)
    q = q.order_by(models.Product.created_at.desc(), models.Product.id.desc())
    for product, category_name in q:
        yield _to_response(product, category_name)


def get_product(db: Session, product_id: int, for_update: bool = False) -> models.Product:
    """The authoritative product row. Checkout reads its price from here only."""
    q = db.query(models.Product).filter(models.Product.id == product_id)
    if for_update:
        q = q.with_for_update()
    product = q.first()
    if not product:
        raise ProductNotFound()
    return product


def get_product_view(db: Session, product_id: int) -> schemas.ProductResponse:
    row = _product_query(db).filter(models.Product.id == product_id).first()
    if not row:
        raise ProductNotFound()
    return _to_response(*row)


def create_product(db: Session, data: schemas.ProductCreate) -> schemas.ProductResponse:
    values = data.model_dump()
    values["author_name"] = values.get("author_name") or config.PLATFORM_NAME
    product = models.Product(**values)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.title)
    return get_product_view(db, product.id)


def update_product(db: Session, product_id: int, data: schemas.ProductUpdate) -> schemas.ProductResponse:
    product = get_product(db, product_id)
    for field, value in data.model_dump().items():
        setattr(product, field, value)
    if not product.author_name:
        product.author_name = config.PLATFORM_NAME
    db.commit()
    return get_product_view(db, product_id)


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    # buyers re-download through their orders, so the product has to stay
    has_orders = db.query(models.Order.id).filter(models.Order.product_id == product_id).first()
    if has_orders:
        raise Conflict("Product has orders and cannot be deleted")
    db.delete(product)
    db.commit()
    logger.info("Deleted product %s", product_id)


# --------------------------- Categories ---------------------------
def list_categories(db: Session) -> list[models.Category]:
    return db.query(models.Category).order_by(models.Category.id).all()


def _get_category(db: Session, category_id: int) -> models.Category:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not category:
        raise NotFound("Category not found")
    return category


def _commit_unique(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(message)


def create_category(db: Session, data: schemas.CategoryCreate) -> models.Category:
    category = models.Category(**data.model_dump())
    db.add(category)
    _commit_unique(db, "Category name or slug already exists")
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, data: schemas.CategoryCreate) -> models.Category:
    category = _get_category(db, category_id)
    for field, value in data.model_dump().items():
        setattr(category, field, value)
    _commit_unique(db, "Category name or slug already exists")
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = _get_category(db, category_id)
    db.query(models.Product).filter(models.Product.category_id == category_id).update(
        {models.Product.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()
    logger.info("Deleted category %s, its products are now uncategorized", category_id)


# --------------------------- Payment methods ---------------------------
def get_active_payment_methods(db: Session) -> list[schemas.PaymentMethodPublic]:
    methods = (
        db.query(models.PaymentMethod)
        .filter(models.PaymentMethod.active.is_(True))
        .order_by(models.PaymentMethod.id)
        .all()
    )
    return [schemas.PaymentMethodPublic.model_validate(m) for m in methods]


def list_payment_methods(db: Session) -> list[models.PaymentMethod]:
    return db.query(models.PaymentMethod).order_by(models.PaymentMethod.id).all()


def find_payment_method(db: Session, method_id: str) -> models.PaymentMethod | None:
    return db.query(models.PaymentMethod).filter(models.PaymentMethod.id == method_id).first()


def _get_payment_method(db: Session, method_id: str) -> models.PaymentMethod:
    method = find_payment_method(db, method_id)
    if not method:
        raise NotFound("Payment method not found")
    return method


def create_payment_method(db: Session, data: schemas.PaymentMethodCreate) -> models.PaymentMethod:
    if find_payment_method(db, data.id):
        raise Conflict("Payment method already exists")
    method = models.PaymentMethod(**data.model_dump())
    db.add(method)
    _commit_unique(db, "Payment method already exists")
    db.refresh(method)
    return method


def update_payment_method(db: Session, method_id: str, data: schemas.PaymentMethodUpdate) -> models.PaymentMethod:
    method = _get_payment_method(db, method_id)
    for field, value in data.model_dump().items():
        setattr(method, field, value)
    db.commit()
    db.refresh(method)
    return method


def delete_payment_method(db: Session, method_id: str) -> None:
    db.delete(_get_payment_method(db, method_id))
    db.commit()


# --------------------------- Banners ---------------------------
def list_banners(db: Session, active_only: bool = True) -> list[models.Banner]:
    q = db.query(models.Banner)
    if active_only:
        q = q.filter(models.Banner.active.is_(True))
    return q.order_by(models.Banner.created_at.desc(), models.Banner.id.desc()).all()


def _get_banner(db: Session, banner_id: int) -> models.Banner:
    banner = db.query(models.Banner).filter(models.Banner.id == banner_id).first()
    if not banner:
        raise NotFound("Banner not found")
    return banner


def create_banner(db: Session, data: schemas.BannerCreate) -> models.Banner:
    banner = models.Banner(**data.model_dump())
    db.add(banner)
    db.commit()
    db.refresh(banner)
    return banner


def update_banner(db: Session, banner_id: int, data: schemas.BannerCreate) -> models.Banner:
    banner = _get_banner(db, banner_id)
    for field, value in data.model_dump().items():
        setattr(banner, field, value)
    db.commit()
    db.refresh(banner)
    return banner


def delete_banner(db: Session, banner_id: int) -> None:
    db.delete(_get_banner(db, banner_id))
    db.commit()
