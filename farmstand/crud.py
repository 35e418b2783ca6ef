import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from farmstand import models, schemas
from farmstand.errors import NotFoundError, ValidationFailed

logger = logging.getLogger(__name__)

# ---------- tiny, single-purpose helpers ----------

def _get_or_raise(db: Session, model, kind: str, record_id: str):
    obj = db.get(model, record_id)
    if obj is None:
        raise NotFoundError(kind, record_id)
    return obj

def _product_fields(payload) -> dict:
    return {"name": payload.name, "price": payload.price, "category": payload.category}

def _build_product(payload, **extra) -> models.Product:
    # raises ValidationFailed from the model @validates hooks
    return models.Product(**_product_fields(payload), **extra)

def cascade_delete_products(db: Session, product_ids: list[str]) -> int:
    """
    Bulk-delete every Product whose id is in product_ids.
    Returns the number of rows removed.
    """
    if not product_ids:
        return 0
    res = db.execute(
        delete(models.Product).where(models.Product.id.in_(product_ids))
    )
    db.commit()
    logger.info("cascade removed %d of %d listed products", res.rowcount, len(product_ids))
    return res.rowcount

# ---------- farms ----------

def list_farms(db: Session) -> list[models.Farm]:
    return db.scalars(select(models.Farm).order_by(models.Farm.created_at, models.Farm.id)).all()

def get_farm(db: Session, farm_id: str) -> models.Farm:
    return _get_or_raise(db, models.Farm, "Farm", farm_id)

def get_farm_products(db: Session, farm: models.Farm) -> list[models.Product]:
    """Resolve the farm's product ids in list order; ids with no record are skipped."""
    ids = list(farm.products or [])
    if not ids:
        return []
    found = {
        p.id: p
        for p in db.scalars(select(models.Product).where(models.Product.id.in_(ids)))
    }
    return [found[pid] for pid in ids if pid in found]

def create_farm(db: Session, payload: schemas.FarmCreate) -> models.Farm:
    obj = models.Farm(
        id=models.new_id(),
        name=payload.name,
        city=payload.city,
        email=payload.email,
        products=[],
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def delete_farm(db: Session, farm_id: str) -> int:
    """
    Delete a farm, then cascade to every product it lists.

    The two steps commit separately: when the cascade fails the farm is
    already gone and its products may remain. Unknown ids are a no-op.
    Returns the number of cascaded product deletions.
    """
    obj = db.get(models.Farm, farm_id)
    if obj is None:
        logger.debug("delete_farm: %s does not exist, nothing to do", farm_id)
        return 0

    product_ids = list(obj.products or [])
    db.delete(obj)
    db.commit()

    return cascade_delete_products(db, product_ids)

def add_product_to_farm(db: Session, farm_id: str, payload: schemas.ProductCreate) -> models.Product:
    """
    Create a product under an existing farm and wire both sides of the reference.

    Two independent writes, farm first. No transaction spans them, so a
    failed product write leaves the farm listing an id with no record.
    """
    farm = get_farm(db, farm_id)
    product = _build_product(payload, id=models.new_id())

    farm.products.append(product.id)
    db.commit()

    product.farm_id = farm.id
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("added product %s to farm %s", product.id, farm.id)
    return product

# ---------- products ----------

def list_products(db: Session, category: Optional[str] = None) -> list[models.Product]:
    stmt = select(models.Product).order_by(models.Product.created_at, models.Product.id)
    if category:
        stmt = stmt.where(models.Product.category == category.lower())
    return db.scalars(stmt).all()

def get_product(db: Session, product_id: str) -> models.Product:
    return _get_or_raise(db, models.Product, "Product", product_id)

def get_product_farm(db: Session, product: models.Product) -> Optional[models.Farm]:
    if not product.farm_id:
        return None
    return db.get(models.Farm, product.farm_id)

def create_product(db: Session, payload: schemas.ProductCreate) -> models.Product:
    obj = _build_product(payload, id=models.new_id())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def update_product(db: Session, product_id: str, payload: schemas.ProductUpdate) -> models.Product:
    """Replace the supplied fields; nothing is written if any of them fails validation."""
    obj = get_product(db, product_id)
    try:
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(obj, field, value)
    except ValidationFailed:
        db.rollback()
        raise
    db.commit()
    db.refresh(obj)
    return obj

def delete_product(db: Session, product_id: str) -> bool:
    """Delete one product. Farm product lists are left as they are."""
    obj = db.get(models.Product, product_id)
    if obj is None:
        return False
    db.delete(obj)
    db.commit()
    return True
