from models.app_config import AppConfig
from models.audit_log import AuditLog
from models.parties import Party
from models.trucks import Truck
from models.lorry_receipts import LorryReceipt
from models.invoices import Invoice
from models.vehicle_hirings import VehicleHiring
from models.booking_registers import BookingRegister

__all__ = ['AppConfig', 'AuditLog', 'BookingRegister', 'Invoice', 'LorryReceipt', 'Party', 'Truck', 'VehicleHiring',]
