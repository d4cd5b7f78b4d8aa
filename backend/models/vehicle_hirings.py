from sqlalchemy import Column, Integer, String, Date, Enum
from database import Base
import enum
from models.audit_mixin import AuditMixin
from models.freight_record import FreightRecordMixin

class OwnerType(enum.Enum):
    SELF = "Self"
    THIRD_PARTY = "Third Party"

class SettlementStatus(enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"

class VehicleHiring(Base, AuditMixin, FreightRecordMixin):
    __tablename__ = "vehicle_hirings"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    booking_id = Column(String, nullable=True)
    date = Column(Date, nullable=False, index=True)
    gr_no = Column(String, nullable=True)
    bill_no = Column(String, nullable=True)
    lorry_no = Column(String, nullable=False)
    driver_no = Column(String, nullable=True)
    owner_name = Column(Enum(OwnerType), default=OwnerType.THIRD_PARTY, nullable=False)
    from_place = Column(String, nullable=True)
    to_place = Column(String, nullable=True)
    pod_status = Column(Enum(SettlementStatus), default=SettlementStatus.PENDING, nullable=False)
    payment_status = Column(Enum(SettlementStatus), default=SettlementStatus.PENDING, nullable=False)
