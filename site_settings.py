import json
from typing import Any, Mapping

from sqlalchemy.orm import Session

import models

DEFAULT_SETTINGS = {
    "site_logo": "",
    "site_favicon": "",
    "payment_mode": "manual",  # manual or auto
    "manual_payment_details": "Send payment to: BKash 017XXXXXXXX",
    "currency": "BDT",
    "currency_symbol": "৳",
}


class SiteSettings:
    """Snapshot of the settings table, loaded per request and passed explicitly."""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    @property
    def payment_mode(self) -> str:
        return (self.get("payment_mode") or "manual").lower()

    @property
    def currency(self) -> str:
        return self.get("currency", DEFAULT_SETTINGS["currency"])

    @property
    def currency_symbol(self) -> str:
        return self.get("currency_symbol", DEFAULT_SETTINGS["currency_symbol"])

    @property
    def manual_payment_details(self) -> str:
        return self.get("manual_payment_details", "")

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)


def load_settings(db: Session) -> SiteSettings:
    rows = db.query(models.Setting).all()
    return SiteSettings({row.key: row.value for row in rows})


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def save_settings(db: Session, values: Mapping[str, Any]) -> SiteSettings:
    for key, value in values.items():
        db.merge(models.Setting(key=key, value=_to_text(value)))
    db.commit()
    return load_settings(db)


def seed_settings(db: Session) -> int:
    """Insert defaults only into an empty table. Returns how many rows were added."""
    if db.query(models.Setting).first():
        return 0
    db.add_all([models.Setting(key=k, value=v) for k, v in DEFAULT_SETTINGS.items()])
    db.commit()
    return len(DEFAULT_SETTINGS)
