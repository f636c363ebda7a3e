import logging
import os
import shutil
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

import catalog
import config
import credentials
import orders
import schemas
import stats
from auth import get_current_admin, get_current_user, issue_token
from database import Base, SessionLocal, engine, get_db
from errors import MarketError, ValidationError
from seed import seed_defaults
from site_settings import SiteSettings, load_settings, save_settings

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# --------------------------- Startup ---------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    config.warn_insecure_defaults()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()
    yield


app = FastAPI(title="DigiForest API", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# uploaded files are served back from /uploads
os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR), name="uploads")


@app.exception_handler(MarketError)
async def market_error_handler(request: Request, exc: MarketError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def get_site_settings(db: Session = Depends(get_db)) -> SiteSettings:
    return load_settings(db)


@app.get("/health")
def health():
    return {"ok": True}


# --------------------------- Auth ---------------------------
@app.post("/auth/register", response_model=schemas.AuthResponse)
def register(user: schemas.UserCreate, db: Session = Depends(get_db)):
    identity = credentials.register(db, user.name, user.email, user.password)
    return {"user": identity, "token": issue_token(identity)}


@app.post("/auth/login", response_model=schemas.AuthResponse)
def login(user: schemas.UserLogin, db: Session = Depends(get_db)):
    identity = credentials.verify(db, user.email, user.password)
    return {"user": identity, "token": issue_token(identity)}


@app.get("/auth/me", response_model=schemas.Identity)
def me(user: schemas.Identity = Depends(get_current_user)):
    return user


# --------------------------- Uploads ---------------------------
@app.post("/upload")
def upload_file(file: UploadFile | None = File(None), admin: schemas.Identity = Depends(get_current_admin)):
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    ext = os.path.splitext(file.filename)[1].lower()
    file_name = f"{uuid4().hex}{ext}"
    file_path = os.path.join(config.UPLOAD_DIR, file_name)
    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)
    logger.info("Admin %s uploaded %s as %s", admin.id, file.filename, file_name)
    return {"url": f"/uploads/{file_name}"}


# --------------------------- Settings ---------------------------
@app.get("/settings")
def get_settings(site: SiteSettings = Depends(get_site_settings)):
    return site.as_dict()


@app.put("/admin/settings")
def update_settings(
    values: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    save_settings(db, values)
    return {"success": True}


# --------------------------- Banners ---------------------------
@app.get("/banners", response_model=List[schemas.BannerResponse])
def get_banners(db: Session = Depends(get_db)):
    return catalog.list_banners(db)


@app.get("/admin/banners", response_model=List[schemas.BannerResponse])
def admin_banners(db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    return catalog.list_banners(db, active_only=False)


@app.post("/admin/banners", response_model=schemas.BannerResponse)
def create_banner(
    banner: schemas.BannerCreate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.create_banner(db, banner)


@app.put("/admin/banners/{banner_id}", response_model=schemas.BannerResponse)
def update_banner(
    banner_id: int,
    banner: schemas.BannerCreate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.update_banner(db, banner_id, banner)


@app.delete("/admin/banners/{banner_id}")
def delete_banner(banner_id: int, db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    catalog.delete_banner(db, banner_id)
    return {"success": True}


# --------------------------- Categories ---------------------------
@app.get("/categories", response_model=List[schemas.CategoryResponse])
def get_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)


@app.post("/admin/categories", response_model=schemas.CategoryResponse)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.create_category(db, category)


@app.put("/admin/categories/{category_id}", response_model=schemas.CategoryResponse)
def update_category(
    category_id: int,
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.update_category(db, category_id, category)


@app.delete("/admin/categories/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    catalog.delete_category(db, category_id)
    return {"success": True}


# --------------------------- Payment methods ---------------------------
@app.get("/payment-methods", response_model=List[schemas.PaymentMethodPublic])
def get_payment_methods(db: Session = Depends(get_db)):
    return catalog.get_active_payment_methods(db)


@app.get("/admin/payment-methods", response_model=List[schemas.PaymentMethodAdmin])
def admin_payment_methods(db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    return catalog.list_payment_methods(db)


@app.post("/admin/payment-methods", response_model=schemas.PaymentMethodAdmin)
def create_payment_method(
    method: schemas.PaymentMethodCreate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.create_payment_method(db, method)


@app.put("/admin/payment-methods/{method_id}", response_model=schemas.PaymentMethodAdmin)
def update_payment_method(
    method_id: str,
    method: schemas.PaymentMethodUpdate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.update_payment_method(db, method_id, method)


@app.delete("/admin/payment-methods/{method_id}")
def delete_payment_method(method_id: str, db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    catalog.delete_payment_method(db, method_id)
    return {"success": True}


# --------------------------- Products ---------------------------
@app.get("/products", response_model=List[schemas.ProductResponse])
def get_products(category: Optional[str] = None, db: Session = Depends(get_db)):
    return list(catalog.list_products(db, category))


@app.get("/products/{product_id}", response_model=schemas.ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog.get_product_view(db, product_id)


@app.post("/products", response_model=schemas.ProductResponse)
def create_product(
    product: schemas.ProductCreate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.create_product(db, product)


@app.put("/products/{product_id}", response_model=schemas.ProductResponse)
def update_product(
    product_id: int,
    product: schemas.ProductUpdate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return catalog.update_product(db, product_id, product)


@app.delete("/products/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    catalog.delete_product(db, product_id)
    return {"success": True}


# --------------------------- Checkout / orders ---------------------------
@app.post("/checkout", response_model=schemas.CheckoutResponse)
def checkout(
    req: schemas.CheckoutRequest,
    db: Session = Depends(get_db),
    user: schemas.Identity = Depends(get_current_user),
    site: SiteSettings = Depends(get_site_settings),
):
    return orders.checkout(db, user, req.product_id, req.payment_method, req.transaction_id, site)


@app.get("/user/orders", response_model=List[schemas.UserOrderResponse])
def user_orders(db: Session = Depends(get_db), user: schemas.Identity = Depends(get_current_user)):
    return orders.list_user_orders(db, user.id)


# --------------------------- Admin ---------------------------
@app.get("/admin/orders", response_model=List[schemas.AdminOrderResponse])
def admin_orders(db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    return orders.list_all_orders(db)


@app.put("/admin/orders/{order_id}/status", response_model=schemas.OrderResponse)
def admin_order_status(
    order_id: int,
    body: schemas.OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: schemas.Identity = Depends(get_current_admin),
):
    return orders.set_order_status(db, order_id, body.status)


@app.get("/admin/stats", response_model=schemas.AdminStats)
def admin_stats(db: Session = Depends(get_db), admin: schemas.Identity = Depends(get_current_admin)):
    return stats.admin_stats(db)
