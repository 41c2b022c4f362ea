import enum
from sqlalchemy import Column, String, Numeric, Boolean, DateTime, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from .ids import new_id


class OrderStatusEnum(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class PaymentMethod(str, enum.Enum):
    pay_on_delivery = "Pay on Delivery"
    other = "Other"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    customer_name = Column(String(128), nullable=False)
    phone = Column(String(32), nullable=False)
    payment_method = Column(String(32), nullable=False, default=PaymentMethod.pay_on_delivery.value)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SAEnum(OrderStatusEnum, name="order_status"),
        nullable=False,
        default=OrderStatusEnum.pending,
    )
    # ссылка на стол, без FK: столы живут отдельно и правятся вручную
    table_id = Column(String(32), nullable=True, index=True)
    # шаг после фиксации заказа не прошёл, нужна ручная сверка
    needs_reconciliation = Column(Boolean, nullable=False, default=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # связи
    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
    )
