# farmstand/schemas.py
from pydantic import BaseModel
from typing import Optional, List

# Request bodies carry types only; field constraints live on the ORM models.

class FarmBase(BaseModel):
    name: str
    city: Optional[str] = None
    email: str

class FarmCreate(FarmBase):
    pass

class FarmOut(FarmBase):
    id: str
    products: List[str] = []

    class Config:
        from_attributes = True

class FarmRef(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

class ProductBase(BaseModel):
    name: str
    price: float
    category: Optional[str] = None

class ProductCreate(ProductBase):
    pass

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None

class ProductOut(ProductBase):
    id: str
    farm_id: Optional[str] = None

    class Config:
        from_attributes = True

class ProductDetail(ProductOut):
    farm: Optional[FarmRef] = None

class FarmDetail(FarmBase):
    id: str
    products: List[ProductOut] = []
