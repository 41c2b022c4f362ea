"""
Корзина покупателя: item_id -> количество.

Живёт только у вызывающего кода, в базу не пишется.
"""
from decimal import Decimal
from typing import Dict, Iterator, Mapping, Optional, Tuple


class Cart:
    def __init__(self, lines: Optional[Mapping[str, int]] = None):
        self._lines: Dict[str, int] = {}
        for item_id, quantity in (lines or {}).items():
            self.set(item_id, quantity)

    def set(self, item_id: str, quantity: int) -> None:
        """Количество <= 0 убирает позицию."""
        if quantity > 0:
            self._lines[item_id] = int(quantity)
        else:
            self._lines.pop(item_id, None)

    def add(self, item_id: str, n: int = 1) -> None:
        self.set(item_id, self.quantity(item_id) + n)

    def remove(self, item_id: str, n: int = 1) -> None:
        self.set(item_id, self.quantity(item_id) - n)

    def quantity(self, item_id: str) -> int:
        return self._lines.get(item_id, 0)

    def clear(self) -> None:
        self._lines.clear()

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(list(self._lines.items()))

    def as_dict(self) -> Dict[str, int]:
        return dict(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._lines

    def total(self, catalog) -> Decimal:
        """Сумма по позициям, которые ещё есть в каталоге."""
        total = Decimal("0")
        for item_id, quantity in self._lines.items():
            item = catalog.get(item_id)
            if item is not None:
                total += Decimal(item.price) * quantity
        return total.quantize(Decimal("0.01"))
