"""
Shopping list API endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from grocery_compare.core.config import settings
from grocery_compare.core.database import get_db
from grocery_compare.dependencies import get_current_user_id, get_comparison_engine
from grocery_compare.routers.compare import build_compare_response
from grocery_compare.services.comparison_engine import ComparisonEngine
from grocery_compare.services.shopping_list_repository import ShoppingListRepository
from grocery_compare.schemas.comparison import CompareResponse
from grocery_compare.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListResponse,
    ListItemCreate,
    ListItemUpdate,
    ListItemResponse,
    ListCompareRequest,
)

router = APIRouter(prefix="/lists", tags=["Shopping Lists"])


def _get_list_or_404(repository: ShoppingListRepository, list_id: int, user_id: int):
    shopping_list = repository.get_by_id(list_id, user_id)
    if not shopping_list:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Shopping list with ID {list_id} not found"
        )
    return shopping_list


@router.get("/", response_model=List[ShoppingListResponse])
def get_lists(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Get all shopping lists of the current user."""
    return ShoppingListRepository(db).get_for_user(user_id)


@router.post("/", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_list(
    list_data: ShoppingListCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Create an empty shopping list."""
    return ShoppingListRepository(db).create(user_id, list_data.name)


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_list(list_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Get a shopping list with its items."""
    return _get_list_or_404(ShoppingListRepository(db), list_id, user_id)


@router.put("/{list_id}", response_model=ShoppingListResponse)
def rename_list(
    list_id: int,
    list_data: ShoppingListUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Rename a shopping list."""
    shopping_list = ShoppingListRepository(db).rename(list_id, list_data.name, user_id)
    if not shopping_list:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Shopping list with ID {list_id} not found"
        )
    return shopping_list


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_list(list_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Delete a shopping list and its items."""
    if not ShoppingListRepository(db).delete(list_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Shopping list with ID {list_id} not found"
        )


# ============================================================================
# LIST ITEMS
# ============================================================================

@router.post("/{list_id}/items", response_model=ListItemResponse, status_code=status.HTTP_201_CREATED)
def add_item(
    list_id: int,
    item: ListItemCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Add an item to a shopping list."""
    repository = ShoppingListRepository(db)
    _get_list_or_404(repository, list_id, user_id)
    return repository.add_item(list_id, item)


@router.put("/items/{item_id}", response_model=ListItemResponse)
def update_item(
    item_id: int,
    update: ListItemUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Edit a list item. A quantity below 1 is stored as 1.
    """
    repository = ShoppingListRepository(db)
    item = repository.get_item(item_id)
    if not item or item.shopping_list.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"List item with ID {item_id} not found"
        )
    return repository.update_item(item_id, update)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """Remove an item from its list."""
    repository = ShoppingListRepository(db)
    item = repository.get_item(item_id)
    if not item or item.shopping_list.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"List item with ID {item_id} not found"
        )
    repository.delete_item(item_id)


# ============================================================================
# COMPARISON
# ============================================================================

@router.post("/{list_id}/compare", response_model=CompareResponse)
async def compare_list(
    list_id: int,
    request: ListCompareRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    """
    Compare a stored shopping list across nearby stores.

    max_distance defaults to the configured DEFAULT_MAX_DISTANCE.
    """
    shopping_list = _get_list_or_404(ShoppingListRepository(db), list_id, user_id)
    items = ShoppingListRepository.to_comparison_items(shopping_list, request.unchecked_only)
    max_distance = request.max_distance if request.max_distance is not None else settings.DEFAULT_MAX_DISTANCE

    result = await engine.compare_shopping_list(items, max_distance)
    return build_compare_response(result)
