from sqlalchemy import Column, Integer, String
from database import Base
from models.audit_mixin import AuditMixin, unique_while_live

class Truck(Base, AuditMixin):
    __tablename__ = "trucks"
    __table_args__ = (unique_while_live('_tenant_truck_no_uc', 'tenant_id', 'truck_no'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    truck_no = Column(String(20), nullable=False, index=True)
    owner_name = Column(String, nullable=True)
    contact_number = Column(String, nullable=True)
