# backend/modules/businesses/routes/business_routes.py

from typing import List

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from core.database import get_db
from modules.businesses.schemas.business_schemas import BusinessProfileResponse
from modules.businesses.services.business_service import BusinessService

router = APIRouter(prefix="/businesses", tags=["Businesses"])


@router.get("", response_model=List[BusinessProfileResponse])
async def list_businesses(db: Session = Depends(get_db)):
    return BusinessService(db).list_all()


@router.get("/top-rated", response_model=List[BusinessProfileResponse])
async def list_top_rated(db: Session = Depends(get_db)):
    """Businesses ordered by average rating, best first"""
    return BusinessService(db).list_top_rated()


@router.get("/search", response_model=List[BusinessProfileResponse])
async def search_businesses(
    name: str = Query(..., min_length=1, description="Part of the business name"),
    db: Session = Depends(get_db),
):
    return BusinessService(db).search(name)


@router.get("/{business_id}", response_model=BusinessProfileResponse)
async def get_business(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    return BusinessService(db).get(business_id)


@router.get("/{business_id}/image")
async def get_business_image(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    business = BusinessService(db).get_image(business_id)
    return Response(
        content=business.image_data,
        media_type=business.image_type or "application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{business.image_name}"'},
    )
