from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from io import BytesIO
from datetime import date
from typing import Optional
import logging

from database import get_db
from crud.freight_records import normalize_on_read
from models.lorry_receipts import LorryReceipt
from models.vehicle_hirings import VehicleHiring
from models.booking_registers import BookingRegister
from utils.ledger_calc import coerce_amount
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = logging.getLogger("reports")

yellow_fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
orange_red_fill = PatternFill(start_color="FF6600", end_color="FF6600", fill_type="solid")
bold_font_black = Font(bold=True, color="000000")
bold_font_white = Font(bold=True, color="FFFFFF")


def _enum_value(value):
    return value.value if value is not None else ""


def _lr_row(lr):
    return [
        lr.lr_no, lr.date, lr.truck_no, (lr.consignor or {}).get("name", ""), (lr.consignee or {}).get("name", ""),
        lr.from_place, lr.to_place, float(coerce_amount(lr.freight)), float(lr.total_charges),
        float(lr.line_total), _enum_value(lr.status), lr.invoice_no,
    ]


def _hiring_row(h):
    return [
        h.date, h.booking_id, h.gr_no, h.bill_no, h.lorry_no, h.driver_no, _enum_value(h.owner_name),
        h.from_place, h.to_place, float(h.freight), float(h.advance), float(h.balance),
        float(h.other_expenses), float(h.total_balance), _enum_value(h.pod_status), _enum_value(h.payment_status),
    ]


def _booking_row(b):
    return [
        b.date, b.booking_id, b.party_name, b.gr_no, b.bill_no, b.lorry_no, _enum_value(b.lorry_type),
        float(coerce_amount(b.weight)), b.from_place, b.to_place, float(b.freight), float(b.advance),
        float(b.balance), float(b.other_expenses), float(b.total_balance), _enum_value(b.payment_status),
    ]


# title, model, header, row builder, columns summed in the TOTAL row
REGISTERS = {
    "lorry-receipts": (
        "LORRY RECEIPTS", LorryReceipt,
        ["LR NO", "DATE", "TRUCK", "CONSIGNOR", "CONSIGNEE", "FROM", "TO", "FREIGHT", "OTHER CHARGES",
         "TOTAL", "STATUS", "INVOICE NO"],
        _lr_row, ("FREIGHT", "OTHER CHARGES", "TOTAL"),
    ),
    "vehicle-hirings": (
        "VEHICLE HIRING", VehicleHiring,
        ["DATE", "BOOKING ID", "GR NO", "BILL NO", "LORRY NO", "DRIVER NO", "OWNER", "FROM", "TO",
         "FREIGHT", "ADVANCE", "BALANCE", "OTHER EXPENSES", "TOTAL BALANCE", "POD", "PAYMENT"],
        _hiring_row, ("FREIGHT", "ADVANCE", "BALANCE", "OTHER EXPENSES", "TOTAL BALANCE"),
    ),
    "booking-registers": (
        "BOOKING REGISTER", BookingRegister,
        ["DATE", "BOOKING ID", "PARTY", "GR NO", "BILL NO", "LORRY NO", "LORRY TYPE", "WEIGHT", "FROM", "TO",
         "FREIGHT", "ADVANCE", "BALANCE", "OTHER EXPENSES", "TOTAL BALANCE", "PAYMENT"],
        _booking_row, ("FREIGHT", "ADVANCE", "BALANCE", "OTHER EXPENSES", "TOTAL BALANCE"),
    ),
}


def write_register_excel(title: str, header: list, rows: list, summed_columns, start_date=None, end_date=None) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = title.title()[:31]

    period = " to ".join(d.strftime("%d-%m-%Y") for d in (start_date, end_date) if d) or "ALL DATES"
    ws.append([title, "", period])
    ws.append(header)
    for row in rows:
        ws.append(row)

    totals = []
    for col_idx, name in enumerate(header):
        if col_idx == 0:
            totals.append("TOTAL")
        elif name in summed_columns:
            totals.append(round(sum(row[col_idx] or 0 for row in rows), 2))
        else:
            totals.append("")
    ws.append(totals)

    # Title row
    title_cell = ws.cell(row=1, column=1)
    title_cell.font = bold_font_black
    title_cell.fill = yellow_fill
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=2)
    title_cell.alignment = Alignment(horizontal='center', vertical='center')

    # Header row
    for col_idx, cell in enumerate(ws[2]):
        cell.fill = orange_red_fill
        cell.font = bold_font_white
        ws.column_dimensions[get_column_letter(col_idx + 1)].width = 14

    # Dates as dd-mm-yyyy
    for row in ws.iter_rows(min_row=3, max_row=ws.max_row - 1):
        for cell in row:
            if isinstance(cell.value, date):
                cell.number_format = "DD-MM-YYYY"

    # Total row
    for cell in ws[ws.max_row]:
        cell.fill = yellow_fill
        cell.font = bold_font_black

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


@router.get("/{register}/excel")
def export_register_excel(
    register: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Download a register as an Excel sheet, oldest entry first, with a TOTAL row."""
    if register not in REGISTERS:
        raise HTTPException(status_code=404, detail=f"Unknown register '{register}'. Choose from: {', '.join(REGISTERS)}")
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")

    title, model, header, build_row, summed_columns = REGISTERS[register]
    query = db.query(model).filter(model.tenant_id == tenant_id)
    if start_date:
        query = query.filter(model.date >= start_date)
    if end_date:
        query = query.filter(model.date <= end_date)
    records = query.order_by(model.date.asc(), model.id.asc()).all()
    if model is not LorryReceipt:
        records = [normalize_on_read(r) for r in records]

    output = write_register_excel(title, header, [build_row(r) for r in records], summed_columns, start_date, end_date)
    logger.info(f"Exported {len(records)} {register} rows to Excel for tenant {tenant_id}")

    filename = f"{register}_{tenant_id}_{date.today().strftime('%Y%m%d')}.xlsx"
    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
