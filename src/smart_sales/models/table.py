import enum
from sqlalchemy import Column, String, DateTime, Enum as SAEnum, func
from ..db.base import Base


class TableStatusEnum(str, enum.Enum):
    free = "free"
    occupied = "occupied"
    reserved = "reserved"
    maintenance = "maintenance"


class DiningTable(Base):
    __tablename__ = "tables"

    id = Column(String(32), primary_key=True)  # table1..table6
    status = Column(
        SAEnum(TableStatusEnum, name="table_status"),
        nullable=False,
        default=TableStatusEnum.free,
    )
    # заполнен только пока стол занят этим заказом
    order_id = Column(String(32), nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
