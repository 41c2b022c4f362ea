from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderLine(Base):
    """Снимок позиции меню на момент заказа, без ссылки на inventory."""

    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    item_id = Column(String(32), nullable=False)
    name = Column(String(128), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # фиксируется на момент заказа
    quantity = Column(Integer, nullable=False, default=1)

    # связи
    order = relationship("Order", back_populates="lines")
