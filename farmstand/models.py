# farmstand/models.py
import math
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, JSON, DateTime
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import validates

from .db import Base
from .errors import ValidationFailed

CATEGORIES = ("fruit", "vegetable", "dairy")


def new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _required_text(field: str, value, message: str) -> str:
    if value is None or str(value) == "":
        raise ValidationFailed(field, message)
    return str(value)


class Farm(Base):
    __tablename__ = "farms"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    city = Column(String, nullable=True)
    email = Column(String, nullable=False)

    # ordered Product ids; membership only, the products table is not owned
    products = Column(MutableList.as_mutable(JSON), nullable=False, default=list)

    # listings follow insertion order
    created_at = Column(DateTime(timezone=True), nullable=False, index=True, default=_utcnow)

    @validates("name")
    def _name(self, key, v):
        return _required_text(key, v, "Farm must have a name!")

    @validates("email")
    def _email(self, key, v):
        return _required_text(key, v, "Email required!")

    def __repr__(self):
        return f"<Farm {self.id} {self.name!r}>"


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String, nullable=True, index=True)

    # plain reference, may dangle once the farm is gone
    farm_id = Column(String, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True, default=_utcnow)

    @validates("name")
    def _name(self, key, v):
        return _required_text(key, v, "name cannot be blank")

    @validates("price")
    def _price(self, key, v):
        if v is None or isinstance(v, bool):
            raise ValidationFailed(key, "price is required")
        try:
            price = float(v)
        except (TypeError, ValueError):
            raise ValidationFailed(key, f"{v!r} is not a number")
        if math.isnan(price):
            raise ValidationFailed(key, "price is required")
        if price < 0:
            raise ValidationFailed(key, f"{price:g} is less than minimum allowed value (0)")
        return price

    @validates("category")
    def _category(self, key, v):
        # lowercase first, then check the enumeration
        if v is None:
            return None
        normalized = str(v).lower()
        if normalized not in CATEGORIES:
            raise ValidationFailed(
                key, f"'{normalized}' is not one of {', '.join(CATEGORIES)}"
            )
        return normalized

    def __repr__(self):
        return f"<Product {self.id} {self.name!r}>"
