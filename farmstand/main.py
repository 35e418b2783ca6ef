import logging
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from farmstand import crud, models, schemas
from farmstand.config import LOG_LEVEL
from farmstand.db import Base, engine, get_db
from farmstand.errors import NotFoundError, ValidationFailed

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Farm Stand API")

# Create tables at startup
@app.on_event("startup")
def _init_db():
    Base.metadata.create_all(bind=engine)

@app.exception_handler(OperationalError)
async def _store_unavailable(request: Request, exc: OperationalError):
    logger.exception("store error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=503, content={"detail": "Store unavailable"})

def _not_found(e: NotFoundError) -> HTTPException:
    logger.info("%s %s not found", e.kind, e.record_id)
    return HTTPException(status_code=404, detail=str(e))

def _invalid(e: ValidationFailed) -> HTTPException:
    logger.info("%s", e)
    return HTTPException(status_code=400, detail=str(e))

def _product_detail(db: Session, obj: models.Product) -> schemas.ProductDetail:
    farm = crud.get_product_farm(db, obj)
    return schemas.ProductDetail(
        **schemas.ProductOut.model_validate(obj).model_dump(),
        farm=schemas.FarmRef.model_validate(farm) if farm else None,
    )

# ---------- farms ----------

@app.get("/farms", response_model=List[schemas.FarmOut])
def list_farms(db: Session = Depends(get_db)):
    return crud.list_farms(db)

@app.post("/farms", response_model=schemas.FarmOut, status_code=201)
def create_farm(body: schemas.FarmCreate, db: Session = Depends(get_db)):
    try:
        return crud.create_farm(db, body)
    except ValidationFailed as e:
        raise _invalid(e)

@app.get("/farms/{farm_id}", response_model=schemas.FarmDetail)
def get_farm(farm_id: str, db: Session = Depends(get_db)):
    try:
        farm = crud.get_farm(db, farm_id)
    except NotFoundError as e:
        raise _not_found(e)
    products = crud.get_farm_products(db, farm)
    return schemas.FarmDetail(
        id=farm.id,
        name=farm.name,
        city=farm.city,
        email=farm.email,
        products=[schemas.ProductOut.model_validate(p) for p in products],
    )

@app.delete("/farms/{farm_id}", status_code=204)
def delete_farm(farm_id: str, db: Session = Depends(get_db)):
    crud.delete_farm(db, farm_id)
    return Response(status_code=204)

@app.post("/farms/{farm_id}/products", response_model=schemas.ProductOut, status_code=201)
def add_product_to_farm(farm_id: str, body: schemas.ProductCreate, db: Session = Depends(get_db)):
    try:
        return crud.add_product_to_farm(db, farm_id, body)
    except NotFoundError as e:
        raise _not_found(e)
    except ValidationFailed as e:
        raise _invalid(e)

# ---------- products ----------

@app.get("/products", response_model=List[schemas.ProductOut])
def list_products(category: Optional[str] = None, db: Session = Depends(get_db)):
    return crud.list_products(db, category)

@app.get("/products/categories", response_model=List[str])
def list_categories():
    return list(models.CATEGORIES)

@app.post("/products", response_model=schemas.ProductOut, status_code=201)
def create_product(body: schemas.ProductCreate, db: Session = Depends(get_db)):
    try:
        return crud.create_product(db, body)
    except ValidationFailed as e:
        raise _invalid(e)

@app.get("/products/{product_id}", response_model=schemas.ProductDetail)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        obj = crud.get_product(db, product_id)
    except NotFoundError as e:
        raise _not_found(e)
    return _product_detail(db, obj)

@app.put("/products/{product_id}", response_model=schemas.ProductOut)
def update_product(product_id: str, body: schemas.ProductUpdate, db: Session = Depends(get_db)):
    try:
        return crud.update_product(db, product_id, body)
    except NotFoundError as e:
        raise _not_found(e)
    except ValidationFailed as e:
        raise _invalid(e)

@app.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    crud.delete_product(db, product_id)
    return Response(status_code=204)
