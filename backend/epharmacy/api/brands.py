from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import List
from epharmacy.api.deps import get_db, admin_required
from epharmacy.models.user import User
from epharmacy.models.brand import Brand
from epharmacy.schemas.brand import BrandResponse, BrandCreate, BrandUpdate

router = APIRouter(prefix="/api/brands", tags=["brands"])


@router.get("/", response_model=List[BrandResponse])
def list_brands(db: Session = Depends(get_db)):
    return db.exec(select(Brand).order_by(Brand.name)).all()


@router.get("/{brand_id}", response_model=BrandResponse)
def get_brand(brand_id: int, db: Session = Depends(get_db)):
    brand = db.get(Brand, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


@router.post("/", response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
def create_brand(
    data: BrandCreate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    brand = Brand(**data.model_dump())
    db.add(brand)
    db.commit()
    db.refresh(brand)
    return brand


@router.put("/{brand_id}", response_model=BrandResponse)
def update_brand(
    brand_id: int,
    data: BrandUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    brand = db.get(Brand, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    
    brand.name = data.name
    db.add(brand)
    db.commit()
    db.refresh(brand)
    return brand


@router.delete("/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_brand(
    brand_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_required)
):
    brand = db.get(Brand, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    
    # Товары остаются без бренда
    for product in brand.products:
        product.brand_id = None
        db.add(product)
    
    db.delete(brand)
    db.commit()
