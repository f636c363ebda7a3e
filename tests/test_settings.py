import os

import config
import credentials
import models
from seed import DEFAULT_CATEGORIES, DEFAULT_PAYMENT_METHODS, DEMO_PRODUCTS, seed_defaults
from site_settings import DEFAULT_SETTINGS, SiteSettings, load_settings, save_settings


def test_settings_are_public_and_admin_writable(client, admin_headers):
    assert client.get("/settings").json() == {}

    res = client.put(
        "/admin/settings",
        json={"payment_mode": "auto", "currency": "USD", "maintenance": True},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json() == {"success": True}

    assert client.get("/settings").json() == {"payment_mode": "auto", "currency": "USD", "maintenance": "true"}


def test_save_settings_overwrites_existing_keys(db):
    save_settings(db, {"currency": "BDT"})
    loaded = save_settings(db, {"currency": "EUR", "currency_symbol": "€"})
    assert loaded.currency == "EUR"
    assert load_settings(db).as_dict() == {"currency": "EUR", "currency_symbol": "€"}


def test_site_settings_accessors_fall_back():
    empty = SiteSettings({})
    assert empty.payment_mode == "manual"
    assert empty.currency == "BDT"
    assert empty.currency_symbol == "৳"
    assert empty.manual_payment_details == ""
    assert SiteSettings({"payment_mode": "Auto"}).payment_mode == "auto"


def test_seed_defaults_is_idempotent(db):
    seed_defaults(db, demo_data=True)
    seed_defaults(db, demo_data=True)

    assert db.query(models.User).filter_by(role="admin").count() == 1
    assert db.query(models.Setting).count() == len(DEFAULT_SETTINGS)
    assert db.query(models.Category).count() == len(DEFAULT_CATEGORIES)
    assert db.query(models.PaymentMethod).count() == len(DEFAULT_PAYMENT_METHODS)
    assert db.query(models.Banner).count() == 1
    assert db.query(models.Product).count() == len(DEMO_PRODUCTS)

    admin = credentials.verify(db, config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
    assert admin.role == "admin"

    shop = db.query(models.Product).filter_by(title="Modern E-commerce React Template").one()
    themes = db.query(models.Category).filter_by(name="Themes").one()
    assert shop.category_id == themes.id
    assert shop.price == 49.0
    assert shop.sales_count == 0


def test_seed_without_demo_products(db):
    seed_defaults(db, demo_data=False)
    assert db.query(models.Product).count() == 0
    assert load_settings(db).payment_mode == "manual"


def test_admin_upload_stores_file(client, admin_headers):
    res = client.post(
        "/upload",
        files={"file": ("theme.zip", b"PK\x03\x04 fake zip", "application/zip")},
        headers=admin_headers,
    )
    assert res.status_code == 200
    url = res.json()["url"]
    assert url.startswith("/uploads/") and url.endswith(".zip")

    stored = os.path.join(config.UPLOAD_DIR, url.rsplit("/", 1)[1])
    with open(stored, "rb") as f:
        assert f.read() == b"PK\x03\x04 fake zip"

    served = client.get(url)
    assert served.status_code == 200
    assert served.content == b"PK\x03\x04 fake zip"


def test_upload_without_file(client, admin_headers):
    res = client.post("/upload", headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "No file uploaded"


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_non_string_settings_are_stored_as_json_text(db):
    loaded = save_settings(db, {"show_banner": False, "featured": 4, "tagline": "Hi", "site_logo": None})
    assert loaded.as_dict() == {"show_banner": "false", "featured": "4", "tagline": "Hi", "site_logo": ""}
