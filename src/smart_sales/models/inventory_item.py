from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint, func
from ..db.base import Base
from .ids import new_id

DEFAULT_CATEGORY = "other"


class InventoryItem(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_inventory_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(128), nullable=False)
    category = Column(String(64), nullable=False, default=DEFAULT_CATEGORY)  # напитки, еда, десерт и т.д.
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)  # остаток, списывается при заказе
    image_file_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
