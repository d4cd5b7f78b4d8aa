from fpdf import FPDF
import os
import tempfile
import logging
from sqlalchemy.orm import Session
from models.invoices import Invoice
from crud.app_config import get_company_profile
from utils.formatting import format_indian_currency

logger = logging.getLogger(__name__)

# Empty rows keep the LR table at a fixed height like the printed bill book
MIN_TABLE_ROWS = 15

COLUMNS = [
    ("Sr.No", 10, 'C'),
    ("Date", 20, 'C'),
    ("Truck", 24, 'L'),
    ("LR No.", 20, 'C'),
    ("From", 24, 'L'),
    ("To", 24, 'L'),
    ("Freight", 22, 'R'),
    ("Other Charges", 22, 'R'),
    ("Balance", 24, 'R'),
]
TABLE_WIDTH = sum(width for _, width, _ in COLUMNS)
LEFT_WIDTH = sum(width for _, width, _ in COLUMNS[:6])
RIGHT_WIDTH = TABLE_WIDTH - LEFT_WIDTH


def _text(value) -> str:
    """Core PDF fonts are latin-1 only."""
    text = "" if value is None else str(value)
    return text.replace("₹", "Rs.").encode("latin-1", "replace").decode("latin-1")


def _money(value) -> str:
    return f"{value or 0:.2f}"


class InvoicePDF(FPDF):
    def __init__(self, company):
        super().__init__()
        self.company = company

    def header(self):
        self.set_font('Arial', 'B', 16)
        self.cell(0, 8, _text(self.company.name or 'Tax Invoice'), 0, 1, 'C')
        self.set_font('Arial', '', 9)
        if self.company.tagline:
            self.cell(0, 5, _text(self.company.tagline), 0, 1, 'C')
        if self.company.address:
            self.multi_cell(0, 5, _text(self.company.address), 0, 'C')
            self.set_x(self.l_margin)
        contact_line = f"Mail-{self.company.email or ''}, Web-{self.company.web}"
        if self.company.contact:
            contact_line += "  |  " + ", ".join(self.company.contact)
        self.cell(0, 5, _text(contact_line), 0, 1, 'C')
        self.set_font('Arial', 'B', 12)
        self.cell(0, 8, 'TAX INVOICE', 'B', 1, 'C')
        self.ln(2)

    def footer(self):
        self.set_y(-15)
        self.set_font('Arial', 'I', 8)
        footer = f"Subject to {self.company.jurisdiction_city} jurisdiction" if self.company.jurisdiction_city else ""
        self.cell(0, 10, _text(f'{footer}    Page {self.page_no()}'.strip()), 0, 0, 'C')


def build_invoice_pdf(db: Session, invoice: Invoice, tenant_id: str) -> str:
    """
    Renders a tax invoice to a temporary PDF file.

    Args:
        db: The database session.
        invoice: The persisted invoice, with its LRs loaded.
        tenant_id: Tenant whose company profile heads the bill.

    Returns:
        The path to the generated PDF file. The caller removes it.
    """
    company = get_company_profile(db, tenant_id)
    billed_to = invoice.billed_to or {}

    pdf = InvoicePDF(company)
    pdf.add_page()

    # Billed-to party and bill number
    pdf.set_font('Arial', 'B', 10)
    pdf.cell(130, 6, 'M/S :', 0, 0, 'L')
    pdf.cell(0, 6, _text(f'BILL NO. : {invoice.bill_no}'), 0, 1, 'L')
    pdf.cell(130, 6, _text(billed_to.get('name', '')), 0, 0, 'L')
    pdf.cell(0, 6, _text(f'DATE : {invoice.bill_date.strftime("%d/%m/%Y")}'), 0, 1, 'L')
    pdf.set_font('Arial', '', 10)
    if billed_to.get('address'):
        pdf.multi_cell(130, 5, _text(billed_to['address']), 0, 'L')
        pdf.set_x(pdf.l_margin)
    pdf.set_font('Arial', 'B', 10)
    pdf.cell(0, 6, _text(f"GST :- {billed_to.get('gst', '')}"), 0, 1, 'L')
    pdf.ln(2)

    # LR table
    pdf.set_font('Arial', 'B', 8)
    for title, width, _ in COLUMNS:
        pdf.cell(width, 7, title, 1, 0, 'C')
    pdf.ln()

    pdf.set_font('Arial', '', 8)
    lorry_receipts = list(invoice.lorry_receipts)
    for index, lr in enumerate(lorry_receipts, start=1):
        values = [
            str(index),
            lr.date.strftime("%d/%m/%Y"),
            lr.truck_no,
            lr.lr_no,
            lr.from_place,
            lr.to_place,
            _money(lr.freight),
            _money(lr.total_charges),
            _money(lr.line_total),
        ]
        for (_, width, align), value in zip(COLUMNS, values):
            pdf.cell(width, 6, _text(value), 1, 0, align)
        pdf.ln()
    for _ in range(max(0, MIN_TABLE_ROWS - len(lorry_receipts))):
        for _, width, _ in COLUMNS:
            pdf.cell(width, 6, '', 1, 0)
        pdf.ln()

    # Company tax ids and bank details beside the totals box
    pdf.set_font('Arial', 'B', 8)
    bank = company.bank_details
    left_lines = [
        f"GSTIN : {company.gstn}",
        f"PAN No. : {company.pan}",
        f"SAC Code : {company.sac_code}" if company.sac_code else "",
        "BANK DETAILS",
        f"BANK NAME : {bank.name}",
        f"BRANCH : {bank.branch}",
        f"A/C NO. : {bank.account_no}",
        f"IFSC CODE : {bank.ifsc_code}",
    ]
    totals = [
        ("AMOUNT", invoice.total_amount),
        ("CGST (2.5%)", invoice.cgst),
        ("SGST (2.5%)", invoice.sgst),
        ("IGST (5%)", invoice.igst),
    ]
    left_lines = [line for line in left_lines if line]
    rows = max(len(left_lines), len(totals))
    for i in range(rows):
        pdf.cell(LEFT_WIDTH, 5, _text(left_lines[i] if i < len(left_lines) else ''), 'LR', 0, 'L')
        if i < len(totals):
            label, value = totals[i]
            pdf.cell(RIGHT_WIDTH - 24, 5, label, 1, 0, 'L')
            pdf.cell(24, 5, _money(value), 1, 1, 'R')
        else:
            pdf.cell(RIGHT_WIDTH, 5, '', 'LR', 1)

    pdf.cell(LEFT_WIDTH, 7, _text(f"Rupees(word): {invoice.amount_in_words} Rupees"), 1, 0, 'L')
    pdf.cell(RIGHT_WIDTH - 24, 7, 'NET AMOUNT', 1, 0, 'L')
    pdf.cell(24, 7, _text(format_indian_currency(invoice.net_amount).replace("₹", "").strip()), 1, 1, 'R')

    pdf.ln(12)
    pdf.set_font('Arial', 'B', 9)
    pdf.cell(0, 6, _text(f"For {company.name}" if company.name else ''), 0, 1, 'R')
    pdf.ln(10)
    pdf.cell(0, 6, 'Authorised Signatory', 0, 1, 'R')

    fd, filepath = tempfile.mkstemp(prefix=f"invoice_{invoice.id}_", suffix=".pdf")
    os.close(fd)
    pdf.output(filepath)
    logger.debug(f"Invoice {invoice.bill_no} rendered to {filepath}")
    return filepath


def invoice_filename(invoice: Invoice) -> str:
    first_word = ((invoice.billed_to or {}).get('name') or 'bill').split(' ')[0] or 'bill'
    return f"Bill-{invoice.bill_no}-{first_word}.pdf"
