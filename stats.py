import logging
from datetime import datetime, time, timedelta

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models
import schemas
from errors import InternalFailure
from orders import admin_orders_query, to_admin_order

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
TREND_DAYS = 30


def admin_stats(db: Session, now: datetime | None = None) -> schemas.AdminStats:
    """Dashboard numbers, recomputed on every call.

    Empty tables give zeros and empty lists. The trend only contains days
    that had completed orders, so its dates are not contiguous.
    """
    now = now or datetime.utcnow()
    # trend starts at midnight
    trend_start = datetime.combine((now - timedelta(days=TREND_DAYS)).date(), time.min)
    try:
        revenue = (
            db.query(func.coalesce(func.sum(models.Order.amount), 0))
            .filter(models.Order.status == "completed")
            .scalar()
        )
        total_orders = db.query(func.count(models.Order.id)).scalar()
        total_users = db.query(func.count(models.User.id)).scalar()
        total_products = db.query(func.count(models.Product.id)).scalar()

        recent_orders = [to_admin_order(row) for row in admin_orders_query(db).limit(10).all()]

        day = func.date(models.Order.created_at)
        trend_rows = (
            db.query(day.label("date"), func.sum(models.Order.amount).label("total"))
            .filter(
                models.Order.status == "completed",
                models.Order.created_at >= trend_start,
            )
            .group_by(day)
            .order_by(day)
            .all()
        )

        recent_users = (
            db.query(models.User)
            .order_by(models.User.created_at.desc(), models.User.id.desc())
            .limit(5)
            .all()
        )

        category_rows = (
            db.query(models.Category.name, func.count(models.Product.id))
            .select_from(models.Product)
            .outerjoin(models.Category, models.Product.category_id == models.Category.id)
            .group_by(models.Category.name)
            .all()
        )

        top_rows = (
            db.query(models.Product.title, models.Product.sales_count)
            .order_by(desc(models.Product.sales_count), models.Product.id)
            .limit(5)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Admin stats query failed")
        raise InternalFailure("Failed to fetch admin stats")

    return schemas.AdminStats(
        revenue=float(revenue or 0),
        orders=total_orders or 0,
        users=total_users or 0,
        products=total_products or 0,
        recentOrders=recent_orders,
        salesTrend=[schemas.TrendPoint(date=str(r.date), total=float(r.total or 0)) for r in trend_rows],
        recentUsers=[schemas.UserSummary.model_validate(u) for u in recent_users],
        categoryDistribution=[
            schemas.CategoryCount(name=name or UNCATEGORIZED, value=count) for name, count in category_rows
        ],
        topProducts=[schemas.TopProduct(title=t, sales_count=c or 0) for t, c in top_rows],
    )
