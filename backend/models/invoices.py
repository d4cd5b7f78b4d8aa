from sqlalchemy import Column, Integer, String, Text, Numeric, Date, Enum, JSON
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin, unique_while_live
from utils.ledger_calc import TaxType

class Invoice(Base, AuditMixin):
    __tablename__ = "invoices"
    __table_args__ = (unique_while_live('_tenant_bill_no_uc', 'tenant_id', 'bill_no'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    bill_no = Column(String, nullable=False, index=True)
    bill_date = Column(Date, nullable=False)
    tax_type = Column(Enum(TaxType), default=TaxType.INTRA, nullable=False)
    billed_to = Column(JSON, default=dict)

    # Stored as computed at creation so reprints show what was billed. Amounts
    # in paise times the 3-decimal tax rates need 5 places; scale 6 keeps them exact.
    total_amount = Column(Numeric(18, 6), default=0, nullable=False)
    cgst = Column(Numeric(18, 6), default=0, nullable=False)
    sgst = Column(Numeric(18, 6), default=0, nullable=False)
    igst = Column(Numeric(18, 6), default=0, nullable=False)
    net_amount = Column(Numeric(18, 6), default=0, nullable=False)
    amount_in_words = Column(Text, nullable=True)

    lorry_receipts = relationship("LorryReceipt", back_populates="invoice", order_by="[LorryReceipt.date, LorryReceipt.id]")
