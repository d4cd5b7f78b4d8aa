from sqlalchemy import Column, Integer, String, Text, Numeric, Date, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin, unique_while_live
from utils import ledger_calc

class LRType(enum.Enum):
    ORIGINAL = "Original"
    DUMMY = "Dummy"

class LRStatus(enum.Enum):
    BOOKED = "Booked"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

class LorryReceipt(Base, AuditMixin):
    __tablename__ = "lorry_receipts"
    __table_args__ = (unique_while_live('_tenant_lr_no_uc', 'tenant_id', 'lr_no'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    lr_type = Column(Enum(LRType), default=LRType.ORIGINAL, nullable=False)
    lr_no = Column(String, nullable=False, index=True)
    truck_no = Column(String, nullable=True)
    date = Column(Date, nullable=False, index=True)
    from_place = Column(String, nullable=True)
    to_place = Column(String, nullable=True)

    # Consignor's own commercial documents
    invoice_no = Column(String, nullable=True)
    invoice_amount = Column(Numeric(12, 2), default=0, nullable=False)
    invoice_date = Column(Date, nullable=True)
    po_no = Column(String, nullable=True)
    po_date = Column(Date, nullable=True)
    eway_bill_no = Column(String, nullable=True)
    eway_bill_date = Column(Date, nullable=True)
    eway_ex_date = Column(Date, nullable=True)

    address_of_delivery = Column(Text, nullable=True)
    charged_weight = Column(Numeric(12, 3), default=0, nullable=False)
    billing_to = Column(JSON, default=dict)
    gst_paid_by = Column(String, nullable=True)
    consignor = Column(JSON, default=dict)
    consignee = Column(JSON, default=dict)
    items = Column(JSON, default=list)
    weight = Column(Numeric(12, 3), default=0, nullable=False)
    actual_weight_mt = Column(Numeric(12, 3), default=0, nullable=False)

    freight = Column(Numeric(12, 2), default=0, nullable=False)
    charges = Column(JSON, default=dict)
    rate = Column(Numeric(12, 2), default=0, nullable=False)
    rate_on = Column(String, nullable=True)
    remark = Column(Text, nullable=True)

    status = Column(Enum(LRStatus), default=LRStatus.BOOKED, nullable=False)
    status_updated_at = Column(DateTime(timezone=True), nullable=True)
    pod_path = Column(String(500), nullable=True)

    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    invoice = relationship("Invoice", back_populates="lorry_receipts")

    @property
    def total_charges(self):
        return ledger_calc.charges_total(self.charges)

    @property
    def line_total(self):
        return ledger_calc.line_total(self)
