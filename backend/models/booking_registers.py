from sqlalchemy import Column, Integer, String, Date, Enum, Numeric
from database import Base
import enum
from models.audit_mixin import AuditMixin
from models.freight_record import FreightRecordMixin
from models.vehicle_hirings import SettlementStatus

class LorryType(enum.Enum):
    OPEN = "Open"
    CLOSED = "Closed"

class BookingRegister(Base, AuditMixin, FreightRecordMixin):
    __tablename__ = "booking_registers"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    booking_id = Column(String, nullable=True)
    party_name = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    gr_no = Column(String, nullable=True)
    bill_no = Column(String, nullable=True)
    lorry_no = Column(String, nullable=True)
    lorry_type = Column(Enum(LorryType), default=LorryType.CLOSED, nullable=False)
    weight = Column(Numeric(12, 3), default=0, nullable=False)
    from_place = Column(String, nullable=True)
    to_place = Column(String, nullable=True)
    payment_status = Column(Enum(SettlementStatus), default=SettlementStatus.PENDING, nullable=False)
