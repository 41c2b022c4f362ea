from typing import Dict, List, Optional, Sequence

from smart_sales.models import InventoryItem, DEFAULT_CATEGORY

ALL_CATEGORIES = "all"


class Catalog:
    """Снимок inventory на момент чтения."""

    def __init__(self, items: Sequence[InventoryItem]):
        self._items: List[InventoryItem] = list(items)
        self._by_id: Dict[str, InventoryItem] = {i.id: i for i in self._items}

    @property
    def items(self) -> List[InventoryItem]:
        return list(self._items)

    def get(self, item_id: str) -> Optional[InventoryItem]:
        return self._by_id.get(item_id)

    def categories(self) -> List[str]:
        seen: List[str] = []
        for item in self._items:
            category = item.category or DEFAULT_CATEGORY
            if category not in seen:
                seen.append(category)
        return [ALL_CATEGORIES, *seen]

    def filter(self, category: str = ALL_CATEGORIES) -> List[InventoryItem]:
        if not category or category == ALL_CATEGORIES:
            return self.items
        return [i for i in self._items if (i.category or DEFAULT_CATEGORY) == category]

    def __len__(self) -> int:
        return len(self._items)
