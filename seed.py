import logging

from sqlalchemy.orm import Session

import config
import credentials
import models
from site_settings import seed_settings

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Themes", "slug": "themes"},
    {"name": "Scripts", "slug": "scripts"},
    {"name": "Assets", "slug": "assets"},
    {"name": "Graphics", "slug": "graphics"},
    {"name": "Plugins", "slug": "plugins"},
]

_MANUAL_INSTRUCTIONS = "Send money to this personal number and provide transaction ID."

DEFAULT_PAYMENT_METHODS = [
    {"id": "bkash", "name": "bKash", "type": "manual", "account_number": "01700000000"},
    {"id": "nagad", "name": "Nagad", "type": "manual", "account_number": "01800000000"},
    {"id": "rocket", "name": "Rocket", "type": "manual", "account_number": "01900000000"},
]

DEMO_PRODUCTS = [
    {
        "title": "Modern E-commerce React Template",
        "description": "A fully responsive e-commerce template built with React, Tailwind CSS, and Framer Motion. Includes 20+ pages and dark mode support.",
        "price": 49.00,
        "thumbnail": "https://picsum.photos/seed/shop/800/600",
        "file_url": "https://example.com/download/react-shop.zip",
        "category": "Themes",
    },
    {
        "title": "Ultimate PHP Admin Dashboard",
        "description": "Powerful admin dashboard script with user management, analytics, and role-based access control. Built with PHP 8.2 and MySQL.",
        "price": 29.00,
        "thumbnail": "https://picsum.photos/seed/admin/800/600",
        "file_url": "https://example.com/download/php-admin.zip",
        "category": "Scripts",
    },
    {
        "title": "Abstract 3D Icon Pack",
        "description": "50+ high-resolution 3D abstract icons for your next design project. Available in PNG, FIG, and BLEND formats.",
        "price": 15.00,
        "thumbnail": "https://picsum.photos/seed/icons/800/600",
        "file_url": "https://example.com/download/3d-icons.zip",
        "category": "Graphics",
    },
    {
        "title": "SaaS Landing Page Kit",
        "description": "High-converting landing page templates for SaaS startups. Clean code, SEO optimized, and easy to customize.",
        "price": 35.00,
        "thumbnail": "https://picsum.photos/seed/saas/800/600",
        "file_url": "https://example.com/download/saas-kit.zip",
        "category": "Themes",
    },
]


def seed_defaults(db: Session, demo_data: bool | None = None) -> None:
    """Fill empty tables with the stock data. Safe to run on every start."""
    if demo_data is None:
        demo_data = config.SEED_DEMO_DATA

    credentials.ensure_user(db, config.ADMIN_NAME, config.ADMIN_EMAIL, config.ADMIN_PASSWORD, role="admin")

    added = seed_settings(db)
    if added:
        logger.info("Seeded %d settings", added)

    if not db.query(models.Category).first():
        db.add_all([models.Category(**c) for c in DEFAULT_CATEGORIES])
        db.commit()
        logger.info("Seeded %d categories", len(DEFAULT_CATEGORIES))

    if not db.query(models.PaymentMethod).first():
        db.add_all(
            [models.PaymentMethod(instructions=_MANUAL_INSTRUCTIONS, **pm) for pm in DEFAULT_PAYMENT_METHODS]
        )
        db.commit()
        logger.info("Seeded %d payment methods", len(DEFAULT_PAYMENT_METHODS))

    if not db.query(models.Banner).first():
        db.add(models.Banner(
            image_url="https://picsum.photos/seed/banner1/1920/600",
            title=f"Welcome to {config.PLATFORM_NAME}",
            subtitle="The ultimate digital marketplace for themes and scripts.",
            link="/",
        ))
        db.commit()

    if demo_data and not db.query(models.Product).first():
        categories = {c.name: c.id for c in db.query(models.Category).all()}
        for p in DEMO_PRODUCTS:
            values = dict(p)
            values["category_id"] = categories.get(values.pop("category"))
            db.add(models.Product(author_name=config.PLATFORM_NAME, **values))
        db.commit()
        logger.info("Seeded %d demo products", len(DEMO_PRODUCTS))


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    from database import Base, SessionLocal, engine

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_defaults(session)
    finally:
        session.close()
