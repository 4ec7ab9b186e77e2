"""
Price alert API endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from grocery_compare.core.database import get_db
from grocery_compare.dependencies import get_current_user_id
from grocery_compare.services.price_alert_repository import PriceAlertRepository
from grocery_compare.schemas.price_alert import PriceAlertCreate, PriceAlertResponse

router = APIRouter(prefix="/alerts", tags=["Price Alerts"])


@router.get("/", response_model=List[PriceAlertResponse])
def get_alerts(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Get the current user's price alerts, newest first."""
    return PriceAlertRepository(db).get_for_user(user_id)


@router.post("/", response_model=PriceAlertResponse, status_code=status.HTTP_201_CREATED)
def create_alert(
    alert: PriceAlertCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Create a price alert.

    The alert fires the next time a price update takes the product's price
    from above target_price to at or below it.
    """
    return PriceAlertRepository(db).create(user_id, alert)


@router.delete("/{alert_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_alert(alert_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Delete a price alert."""
    if not PriceAlertRepository(db).delete(alert_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Price alert with ID {alert_id} not found"
        )
