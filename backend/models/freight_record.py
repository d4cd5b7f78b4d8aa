from sqlalchemy import Column, Numeric, JSON


class FreightRecordMixin:
    """Money columns shared by vehicle hirings and booking registers.

    ``advance``, ``balance`` and ``total_balance`` are derived from
    ``freight``, the ``advances`` ledger and ``other_expenses``. They are
    stored so list screens can show them, and recomputed on every write and
    every read (see crud.freight_records).
    """
    freight = Column(Numeric(12, 2), default=0, nullable=False)
    advance = Column(Numeric(12, 2), default=0, nullable=False)
    advances = Column(JSON, default=list, nullable=True)
    balance = Column(Numeric(12, 2), default=0, nullable=False)
    other_expenses = Column(Numeric(12, 2), default=0, nullable=False)
    total_balance = Column(Numeric(12, 2), default=0, nullable=False)
