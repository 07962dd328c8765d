# backend/modules/brands/routes/cafe_routes.py

"""
Public cafe listing for the customer app.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db

from ..services.cafe_service import CafeService
from ..schemas.brand_schemas import BrandOut, NearbyBranchOut

router = APIRouter(prefix="/cafes", tags=["Cafes"])


@router.get("", response_model=List[BrandOut])
def list_cafes(db: Session = Depends(get_db)):
    return CafeService(db).list_brands()


@router.get("/nearby", response_model=List[NearbyBranchOut])
def nearby_cafes(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    db: Session = Depends(get_db),
):
    return CafeService(db).nearby_branches(lat, lng)


@router.get("/{brand_id}", response_model=BrandOut)
def get_cafe(brand_id: str, db: Session = Depends(get_db)):
    return CafeService(db).get_brand(brand_id)
