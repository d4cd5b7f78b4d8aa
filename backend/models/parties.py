from sqlalchemy import Column, Integer, String, Text, Enum
from database import Base
import enum
from models.audit_mixin import AuditMixin, unique_while_live

class PartyType(enum.Enum):
    CONSIGNOR = "Consignor"
    CONSIGNEE = "Consignee"
    BOTH = "Both"

class Party(Base, AuditMixin):
    __tablename__ = "parties"
    __table_args__ = (unique_while_live('_tenant_party_name_uc', 'tenant_id', 'name'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    pan = Column(String(10), nullable=True)
    gst = Column(String(15), nullable=True)
    party_type = Column(Enum(PartyType), default=PartyType.BOTH, nullable=False)
