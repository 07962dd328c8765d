"""Public cafe listing shown in the customer app."""

import math
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from ..models.brand_models import Brand, Branch
from ..exceptions import BrandNotFoundError
from ..schemas.brand_schemas import BrandSummary, NearbyBranchOut

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in kilometres"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class CafeService:
    def __init__(self, db: Session):
        self.db = db

    def list_brands(self) -> List[Brand]:
        return (
            self.db.query(Brand)
            .options(selectinload(Brand.branches))
            .order_by(Brand.name.asc())
            .all()
        )

    def get_brand(self, brand_id: str) -> Brand:
        brand = (
            self.db.query(Brand)
            .options(selectinload(Brand.branches))
            .filter(Brand.id == brand_id)
            .first()
        )
        if brand is None:
            raise BrandNotFoundError(brand_id)
        return brand

    def nearby_branches(
        self, lat: Optional[float] = None, lng: Optional[float] = None
    ) -> List[NearbyBranchOut]:
        """
        Every branch with its brand, nearest first when a position is given.

        Branches without coordinates are measured from (0, 0) so they sort
        to the end for any realistic customer position.
        """
        branches = (
            self.db.query(Branch)
            .options(selectinload(Branch.brand))
            .order_by(Branch.created_at.asc())
            .all()
        )

        results = []
        for branch in branches:
            item = NearbyBranchOut.model_validate(
                {
                    **{c.key: getattr(branch, c.key) for c in Branch.__table__.columns},
                    "brand": BrandSummary.model_validate(branch.brand),
                }
            )
            if lat is not None and lng is not None:
                item.distance_km = round(
                    haversine_km(lat, lng, branch.latitude or 0.0, branch.longitude or 0.0), 3
                )
            results.append(item)

        if lat is not None and lng is not None:
            results.sort(key=lambda b: b.distance_km)
        return results
