"""
API Router for prices and price history.
"""

import time
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, UploadFile, File
from sqlalchemy.orm import Session

from grocery_compare.core.database import get_db
from grocery_compare.services.price_repository import PriceRepository
from grocery_compare.services.price_update_service import PriceUpdateService
from grocery_compare.services.price_csv_loader import PriceSheetError, decode_upload, load_price_sheet
from grocery_compare.schemas.price import (
    PriceCreate,
    PriceResponse,
    PriceListResponse,
    PriceHistoryPoint,
    PriceUpdateResponse,
    PriceImportRequest,
    BulkOperationResponse,
    CSVUploadResponse,
)

router = APIRouter(prefix="/prices", tags=["Prices"])

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB


# ============================================================================
# READ ENDPOINTS
# ============================================================================

@router.get("/", response_model=PriceListResponse)
def get_prices(
    db: Session = Depends(get_db),
    store_id: Optional[int] = Query(None, description="Filter by store ID"),
    product_name: Optional[str] = Query(None, description="Filter by exact product name"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """
    Get current prices by store and/or exact product name.

    At least one of store_id or product_name is required.
    """
    if store_id is None and not product_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="store_id or product_name parameter is required"
        )

    entries, total = PriceRepository(db).get_all(store_id, product_name, skip, limit)
    return PriceListResponse(
        items=[PriceResponse.model_validate(e) for e in entries],
        total=total,
    )


@router.get("/search", response_model=PriceListResponse)
def search_prices(
    q: str = Query(..., min_length=1, description="Case-insensitive product name fragment"),
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """
    Search current prices by partial, case-insensitive product name.
    """
    entries, total = PriceRepository(db).search(q, skip, limit)
    return PriceListResponse(
        items=[PriceResponse.model_validate(e) for e in entries],
        total=total,
    )


@router.get("/history", response_model=List[PriceHistoryPoint])
def get_price_history(
    store_id: int = Query(..., description="Store ID"),
    product_name: str = Query(..., min_length=1, description="Exact product name"),
    db: Session = Depends(get_db),
):
    """
    Price history for one product at one store, oldest first.
    """
    history = PriceRepository(db).get_history(store_id, product_name)
    return [PriceHistoryPoint.model_validate(point) for point in history]


# ============================================================================
# WRITE ENDPOINTS
# ============================================================================

@router.put("/", response_model=PriceUpdateResponse)
def upsert_price(entry: PriceCreate, db: Session = Depends(get_db)):
    """
    Set the current price of a product at a store.

    Creates the price if the (store, product) pair is new, otherwise replaces it.
    Appends a history point and returns any price alerts that fired.
    """
    row, created, triggered = PriceUpdateService(db).upsert_price(entry)
    return PriceUpdateResponse(
        price=PriceResponse.model_validate(row),
        created=created,
        triggered_alerts=triggered,
    )


@router.post("/import", response_model=BulkOperationResponse)
def import_prices(request: PriceImportRequest, db: Session = Depends(get_db)):
    """
    Import raw price documents (e.g. scraped data).

    Each document needs a store id, product name and price; malformed
    documents are reported in errors and skipped.
    """
    result = PriceUpdateService(db).import_raw_prices(request.documents)
    return BulkOperationResponse(**result)


@router.post("/upload-csv", response_model=CSVUploadResponse)
async def upload_price_sheet(
    file: UploadFile = File(..., description="CSV file with store prices"),
    db: Session = Depends(get_db),
):
    """
    Upload a CSV price sheet to create or update current prices.

    **CSV Format:**
    Required headers (case-insensitive): store_id, product_name, price.
    Optional: is_on_sale (true/false, yes/no, 1/0).

    **Example CSV:**
    ```csv
    store_id,product_name,price,is_on_sale
    1,Organic Milk (1 gallon),3.99,true
    2,Organic Milk (1 gallon),4.29,false
    ```

    Every row goes through the same path as a single price update, so
    history is appended and alerts fire as usual.
    """
    start_time = time.time()

    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be a CSV file (.csv extension)"
        )

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File size exceeds 10 MB limit"
        )

    try:
        documents, errors, total_rows, skipped_count = load_price_sheet(decode_upload(content))
    except PriceSheetError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    result = PriceUpdateService(db).import_raw_prices(documents)
    all_errors = errors + [{"error": message} for message in result["errors"]]

    return CSVUploadResponse(
        success=len(all_errors) == 0,
        total_rows=total_rows,
        created_count=result["created_count"],
        updated_count=result["updated_count"],
        skipped_count=skipped_count,
        failed_count=len(all_errors),
        errors=all_errors,
        processing_time_seconds=round(time.time() - start_time, 2)
    )


@router.delete("/{price_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_price(price_id: int, db: Session = Depends(get_db)):
    """
    Delete a current price. History is kept.
    """
    if not PriceRepository(db).delete(price_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Price entry with ID {price_id} not found"
        )
