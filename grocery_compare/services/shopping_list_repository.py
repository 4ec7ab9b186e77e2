"""
Repository layer for ShoppingList and ListItem operations.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from grocery_compare.core.exceptions import InvalidInput
from grocery_compare.models.shopping_list import ShoppingList, ListItem
from grocery_compare.schemas.comparison import ShoppingListItem
from grocery_compare.schemas.shopping_list import ListItemCreate, ListItemUpdate


class ShoppingListRepository:
    """Repository for shopping lists and their items, bound to one session"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, name: str) -> ShoppingList:
        """Create an empty list"""
        db_list = ShoppingList(user_id=user_id, name=name.strip())
        self.db.add(db_list)
        self.db.commit()
        self.db.refresh(db_list)
        return db_list

    def get_for_user(self, user_id: int) -> List[ShoppingList]:
        return self.db.query(ShoppingList).filter(
            ShoppingList.user_id == user_id
        ).order_by(ShoppingList.id).all()

    def get_by_id(self, list_id: int, user_id: Optional[int] = None) -> Optional[ShoppingList]:
        query = self.db.query(ShoppingList).filter(ShoppingList.id == list_id)
        if user_id is not None:
            query = query.filter(ShoppingList.user_id == user_id)
        return query.first()

    def rename(self, list_id: int, name: str, user_id: Optional[int] = None) -> Optional[ShoppingList]:
        db_list = self.get_by_id(list_id, user_id)
        if not db_list:
            return None

        db_list.name = name.strip()
        self.db.commit()
        self.db.refresh(db_list)
        return db_list

    def delete(self, list_id: int, user_id: Optional[int] = None) -> bool:
        """Delete a list and its items"""
        db_list = self.get_by_id(list_id, user_id)
        if not db_list:
            return False

        self.db.delete(db_list)
        self.db.commit()
        return True

    # ============================================================================
    # LIST ITEMS
    # ============================================================================

    def add_item(self, list_id: int, item: ListItemCreate) -> ListItem:
        product_name = item.product_name.strip()
        if not product_name:
            raise InvalidInput("product_name must not be blank")

        db_item = ListItem(
            list_id=list_id,
            product_name=product_name,
            quantity=item.quantity,
            checked=item.checked,
        )
        self.db.add(db_item)
        self.db.commit()
        self.db.refresh(db_item)
        return db_item

    def get_item(self, item_id: int) -> Optional[ListItem]:
        return self.db.query(ListItem).filter(ListItem.id == item_id).first()

    def update_item(self, item_id: int, update: ListItemUpdate) -> Optional[ListItem]:
        """Edit an item; quantities below 1 are clamped to 1"""
        db_item = self.get_item(item_id)
        if not db_item:
            return None

        if update.product_name is not None:
            product_name = update.product_name.strip()
            if not product_name:
                raise InvalidInput("product_name must not be blank")
            db_item.product_name = product_name
        if update.quantity is not None:
            db_item.quantity = max(1, update.quantity)
        if update.checked is not None:
            db_item.checked = update.checked

        self.db.commit()
        self.db.refresh(db_item)
        return db_item

    def delete_item(self, item_id: int) -> bool:
        db_item = self.get_item(item_id)
        if not db_item:
            return False

        self.db.delete(db_item)
        self.db.commit()
        return True

    @staticmethod
    def to_comparison_items(shopping_list: ShoppingList, unchecked_only: bool = False) -> List[ShoppingListItem]:
        """Items of a stored list in the shape the comparison engine takes"""
        return [
            ShoppingListItem(
                product_name=item.product_name,
                quantity=item.quantity,
                checked=item.checked,
            )
            for item in shopping_list.items
            if not (unchecked_only and item.checked)
        ]
