"""
Store API endpoints.
"""

from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from grocery_compare.core.database import get_db
from grocery_compare.services.store_repository import StoreRepository
from grocery_compare.schemas.store import StoreCreate, StoreResponse, StoreListResponse

router = APIRouter(prefix="/stores", tags=["Stores"])


@router.post("/", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
def create_store(store_data: StoreCreate, db: Session = Depends(get_db)):
    """
    Create a new store.

    **Required fields:**
    - name: Store display name
    - chain: Store chain
    - distance: Precomputed travel distance in miles
    """
    store = StoreRepository(db).create(store_data)
    return StoreResponse.model_validate(store)


@router.get("/", response_model=StoreListResponse)
def get_stores(
    db: Session = Depends(get_db),
    max_distance: Optional[Decimal] = Query(None, ge=0, description="Only stores within this many miles"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Maximum records to return"),
):
    """
    Get stores, nearest first, optionally limited to a maximum distance.
    """
    repository = StoreRepository(db)
    if max_distance is not None:
        stores = repository.get_within_distance(max_distance)
        return StoreListResponse(
            items=[StoreResponse.model_validate(s) for s in stores],
            total=len(stores),
        )

    stores, total = repository.get_all(skip, limit)
    return StoreListResponse(
        items=[StoreResponse.model_validate(s) for s in stores],
        total=total,
    )


@router.get("/{store_id}", response_model=StoreResponse)
def get_store_by_id(store_id: int, db: Session = Depends(get_db)):
    """
    Get a specific store by ID.
    """
    store = StoreRepository(db).get_by_id(store_id)
    if not store:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Store with ID {store_id} not found"
        )
    return StoreResponse.model_validate(store)
