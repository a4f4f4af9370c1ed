"""
Report builders.

Each ``*_report`` function turns a list of records into a ``ReportTable``
(rows plus computed totals). ``render_xlsx`` and ``render_pdf`` turn a table
into file bytes. PDF layout is a fixed grid: a set number of rows per page,
the column header repeated on each page, and a totals box on the last page.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from typing import Dict, Iterable, List, Optional

import pytz
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from app.core.config import settings

TEXT = "text"
INT = "int"
MONEY = "money"
DATE = "date"


@dataclass
class Column:
    header: str
    width: float  # PDF points
    kind: str = TEXT


@dataclass
class SummaryLine:
    key: str
    label: str
    value: float
    kind: str = MONEY  # MONEY, or INT for unit/record counts
    suffix: str = ""


@dataclass
class ReportTable:
    kind: str    # "inventory", "purchases", ...
    title: str   # "Inventory Report"
    columns: List[Column]
    rows: List[list] = field(default_factory=list)
    totals_row: list = field(default_factory=list)
    summary: List[SummaryLine] = field(default_factory=list)

    def total(self, key: str) -> float:
        for line in self.summary:
            if line.key == key:
                return line.value
        raise KeyError(key)

    @property
    def label(self) -> str:
        return self.kind.capitalize()


# ==========================================
# 1. TABLE BUILDERS
# ==========================================

def inventory_report(items: Iterable) -> ReportTable:
    """Stock valuation: value = quantity × unit cost, revenue = quantity × unit price."""
    table = ReportTable(
        kind="inventory",
        title="Inventory Report",
        columns=[
            Column("SKU", 60),
            Column("Product Name", 160),
            Column("Category", 80),
            Column("Quantity", 60, INT),
            Column("Unit Cost", 80, MONEY),
            Column("Unit Price", 80, MONEY),
            Column("Total Inventory Value", 110, MONEY),
            Column("Total Potential Revenue", 120, MONEY),
        ],
    )

    total_qty = 0
    total_value = 0.0
    total_revenue = 0.0

    for it in items:
        qty = int(it.quantity or 0)
        cost = float(it.unit_cost or 0)
        price = float(it.unit_price or 0)
        value = qty * cost
        revenue = qty * price

        total_qty += qty
        total_value += value
        total_revenue += revenue

        table.rows.append([it.sku or "", it.name or "", it.category or "", qty, cost, price, value, revenue])

    table.totals_row = ["", "", "Totals", total_qty, None, None, total_value, total_revenue]
    table.summary = [
        SummaryLine("total_quantity", "Subtotal (Quantity)", total_qty, INT, " units"),
        SummaryLine("total_value", "Total Inventory Value", total_value),
        SummaryLine("total_revenue", "Total Potential Revenue", total_revenue),
        SummaryLine("total_profit", "Total Potential Profit", total_revenue - total_value),
    ]
    return table


def purchases_report(purchases: Iterable) -> ReportTable:
    """One row per purchased line; cost = quantity × cost price."""
    table = ReportTable(
        kind="purchases",
        title="Purchase Report",
        columns=[
            Column("Date", 70, DATE),
            Column("Purchase ID", 130),
            Column("Supplier", 120),
            Column("SKU", 70),
            Column("Product", 150),
            Column("Quantity", 50, INT),
            Column("Cost Price", 80, MONEY),
            Column("Subtotal", 90, MONEY),
        ],
    )

    count = 0
    total_qty = 0
    total_cost = 0.0

    for purchase in purchases:
        count += 1
        for line in purchase.items:
            subtotal = line.quantity * line.cost_price
            total_qty += line.quantity
            total_cost += subtotal
            table.rows.append([
                purchase.date, purchase.purchase_id, purchase.supplier or "",
                line.sku, line.name or "", line.quantity, line.cost_price, subtotal,
            ])

    table.totals_row = ["", "", "", "", "Totals", total_qty, None, total_cost]
    table.summary = [
        SummaryLine("purchase_count", "Purchases", count, INT),
        SummaryLine("total_quantity", "Total Quantity", total_qty, INT, " units"),
        SummaryLine("total_cost", "Total Purchase Cost", total_cost),
    ]
    return table


def sales_report(sales: Iterable, unit_costs: Optional[Dict[str, float]] = None) -> ReportTable:
    """
    One row per sold line. Revenue = quantity × selling price, cost uses the
    current inventory unit cost of the SKU, profit = revenue - cost.
    """
    unit_costs = unit_costs or {}
    table = ReportTable(
        kind="sales",
        title="Sales Report",
        columns=[
            Column("Date", 70, DATE),
            Column("Invoice", 120),
            Column("Customer", 100),
            Column("SKU", 60),
            Column("Product", 110),
            Column("Qty", 40, INT),
            Column("Unit Price", 65, MONEY),
            Column("Revenue", 70, MONEY),
            Column("Cost", 65, MONEY),
            Column("Profit", 60, MONEY),
        ],
    )

    count = 0
    total_qty = 0
    total_revenue = 0.0
    total_cost = 0.0

    for sale in sales:
        count += 1
        for line in sale.items:
            revenue = line.quantity * line.selling_price
            cost = line.quantity * float(unit_costs.get(line.sku, 0) or 0)
            total_qty += line.quantity
            total_revenue += revenue
            total_cost += cost
            table.rows.append([
                sale.date, sale.sale_id, sale.customer or "", line.sku, line.name or "",
                line.quantity, line.selling_price, revenue, cost, revenue - cost,
            ])

    total_profit = total_revenue - total_cost
    table.totals_row = ["", "", "", "", "Totals", total_qty, None, total_revenue, total_cost, total_profit]
    table.summary = [
        SummaryLine("sale_count", "Sales", count, INT),
        SummaryLine("total_quantity", "Total Sold", total_qty, INT, " units"),
        SummaryLine("total_revenue", "Total Revenue", total_revenue),
        SummaryLine("total_cost", "Total Cost", total_cost),
        SummaryLine("total_profit", "Total Profit", total_profit),
    ]
    return table


def orders_report(orders: Iterable) -> ReportTable:
    """One row per order; total = Σ qty × price of its items."""
    table = ReportTable(
        kind="orders",
        title="Order Report",
        columns=[
            Column("Date", 80, DATE),
            Column("Order No", 140),
            Column("Customer", 180),
            Column("Items", 60, INT),
            Column("Status", 90),
            Column("Total", 110, MONEY),
        ],
    )

    count = 0
    grand_total = 0.0
    approved_total = 0.0

    for order in orders:
        count += 1
        total = sum(item.qty * item.price for item in order.items)
        status_value = getattr(order.status, "value", order.status)
        grand_total += total
        if status_value == "Approved":
            approved_total += total
        table.rows.append([order.date, order.order_number, order.customer_name or "", len(order.items), status_value, total])

    table.totals_row = ["", "", "Totals", None, "", grand_total]
    table.summary = [
        SummaryLine("order_count", "Orders", count, INT),
        SummaryLine("total_value", "Total Order Value", grand_total),
        SummaryLine("approved_value", "Approved Order Value", approved_total),
    ]
    return table


# ==========================================
# 2. FILENAMES & FORMATTING
# ==========================================

def report_filename(table: ReportTable, extension: str, now: Optional[datetime] = None) -> str:
    """``Inventory_Report_2025-01-25.xlsx`` / ``Inventory_Report_2025-01-25_1737797400000.pdf``"""
    now = now or datetime.utcnow()
    stem = f"{table.label}_Report_{now.strftime('%Y-%m-%d')}"
    if extension == "pdf":
        stem = f"{stem}_{epoch_millis(now)}"
    return f"{stem}.{extension}"


def epoch_millis(now: datetime) -> int:
    return int(now.replace(tzinfo=pytz.utc).timestamp() * 1000)


def format_money(value: float) -> str:
    return f"{settings.CURRENCY} {float(value or 0):.2f}"


def format_cell(value, kind: str) -> str:
    if value is None:
        return ""
    if kind == MONEY:
        return format_money(value)
    if kind == DATE and isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    return str(value)


def format_summary(line: SummaryLine) -> str:
    if line.kind == MONEY:
        return f"{line.label}: {format_money(line.value)}"
    return f"{line.label}: {int(line.value)}{line.suffix}"


def print_date(now: datetime) -> str:
    local = now.replace(tzinfo=pytz.utc).astimezone(pytz.timezone(settings.REPORT_TIMEZONE))
    return local.strftime("%m/%d/%Y, %I:%M:%S %p")


# ==========================================
# 3. XLSX
# ==========================================

def render_xlsx(table: ReportTable, company_name: str, now: Optional[datetime] = None) -> bytes:
    now = now or datetime.utcnow()

    wb = Workbook()
    ws = wb.active
    ws.title = table.title[:31]

    ws.append([f"{company_name} - {table.title}"])
    ws["A1"].font = Font(bold=True, size=14)
    ws.append(["Date:", now.strftime("%Y-%m-%d")])
    ws.append([])

    ws.append([column.header for column in table.columns])
    header_row = ws.max_row
    header_fill = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")
    for idx in range(1, len(table.columns) + 1):
        cell = ws.cell(row=header_row, column=idx)
        cell.font = Font(bold=True)
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for row in table.rows:
        ws.append(row)
        _format_row(ws, ws.max_row, table.columns)

    ws.append([])
    ws.append(table.totals_row)
    _format_row(ws, ws.max_row, table.columns)
    for idx in range(1, len(table.columns) + 1):
        ws.cell(row=ws.max_row, column=idx).font = Font(bold=True)

    for line in table.summary:
        ws.append([line.label, round(line.value, 2) if line.kind == MONEY else int(line.value)])

    for idx, column in enumerate(table.columns, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = max(12, len(column.header) + 4)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _format_row(ws, row_idx: int, columns: List[Column]) -> None:
    for idx, column in enumerate(columns, start=1):
        cell = ws.cell(row=row_idx, column=idx)
        if column.kind == MONEY:
            cell.number_format = "0.00"
        elif column.kind == DATE:
            cell.number_format = "yyyy-mm-dd"


# ==========================================
# 4. PDF
# ==========================================

PAGE_SIZE = landscape(A4)
MARGIN = 40
ROW_HEIGHT = 18
FIRST_PAGE_TABLE_TOP = 150
FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


def page_count(row_count: int, rows_per_page: int) -> int:
    return max(1, math.ceil(row_count / rows_per_page))


def _fit(text: str, width: float, font: str, size: float) -> str:
    """Trim text with an ellipsis so it fits inside a cell."""
    if stringWidth(text, font, size) <= width:
        return text
    while text and stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..."


class _PdfPage:
    """Top-left based drawing helpers over a reportlab canvas."""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.width, self.height = PAGE_SIZE

    def text(self, x: float, y: float, value: str, font: str = FONT, size: float = 10):
        self.pdf.setFont(font, size)
        self.pdf.drawString(x, self.height - y - size, value)

    def centred(self, y: float, value: str, size: float = 9):
        self.pdf.setFont(FONT, size)
        self.pdf.drawCentredString(self.width / 2, self.height - y - size, value)

    def rect(self, x: float, y: float, w: float, h: float):
        self.pdf.rect(x, self.height - y - h, w, h, stroke=1, fill=0)

    def line(self, x1: float, y1: float, x2: float, y2: float):
        self.pdf.line(x1, self.height - y1, x2, self.height - y2)


def render_pdf(
    table: ReportTable,
    company,
    printed_by: str = "System",
    now: Optional[datetime] = None,
    rows_per_page: Optional[int] = None,
) -> bytes:
    """
    Render ``table`` on A4 landscape pages.

    ``company`` needs ``name``, ``address``, ``phone`` and ``email``
    attributes. Row count per page is fixed; there is no reflow.
    """
    now = now or datetime.utcnow()
    rows_per_page = rows_per_page or settings.PDF_ROWS_PER_PAGE
    total_pages = page_count(len(table.rows), rows_per_page)

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
    pdf.setTitle(f"{company.name} - {table.title}")
    page = _PdfPage(pdf)

    col_x = []
    x = MARGIN
    for column in table.columns:
        col_x.append(x)
        x += column.width

    def draw_row(y: float, values: List[str], font: str, size: float):
        for column, cx, value in zip(table.columns, col_x, values):
            page.rect(cx, y, column.width, ROW_HEIGHT)
            page.text(cx + 3, y + 4, _fit(value, column.width - 6, font, size), font, size)

    y = FIRST_PAGE_TABLE_TOP
    for page_no in range(1, total_pages + 1):
        if page_no == 1:
            _draw_letterhead(page, table, company, printed_by, now)
            y = FIRST_PAGE_TABLE_TOP
        else:
            pdf.showPage()
            y = MARGIN

        draw_row(y, [column.header for column in table.columns], FONT_BOLD, 9)
        y += ROW_HEIGHT

        start = (page_no - 1) * rows_per_page
        for row in table.rows[start:start + rows_per_page]:
            values = [format_cell(value, column.kind) for column, value in zip(table.columns, row)]
            draw_row(y, values, FONT, 9)
            y += ROW_HEIGHT

        if page_no == total_pages:
            _draw_totals_box(page, table, y)

        page.centred(page.height - 40, f"Generated by {company.name} Inventory System")
        page.centred(page.height - 25, f"Page {page_no} of {total_pages}")

    pdf.save()
    return buffer.getvalue()


def _draw_letterhead(page: _PdfPage, table: ReportTable, company, printed_by: str, now: datetime):
    page.text(MARGIN, 40, company.name, FONT_BOLD, 22)
    page.text(MARGIN, 70, company.address or "")
    page.text(MARGIN, 85, f"Phone: {company.phone or ''}")
    page.text(MARGIN, 100, f"Email: {company.email or ''}")

    right = 620
    page.text(right, 40, table.title.upper(), FONT_BOLD, 15)
    page.text(right, 63, f"Print Date: {print_date(now)}")
    page.text(right, 78, f"Report ID: REP-{epoch_millis(now)}")
    page.text(right, 93, "Status: Generated")
    page.text(right, 108, f"Printed by: {printed_by}")

    page.line(MARGIN, 130, page.width - MARGIN, 130)


def _draw_totals_box(page: _PdfPage, table: ReportTable, table_bottom: float):
    box_w = 230
    box_h = 14 + ROW_HEIGHT * len(table.summary)
    box_x = page.width - MARGIN - box_w
    # Keep the box clear of the footer
    box_y = min(table_bottom + 20, page.height - 60 - box_h)

    page.rect(box_x, box_y, box_w, box_h)
    for idx, line in enumerate(table.summary):
        page.text(box_x + 10, box_y + 10 + idx * ROW_HEIGHT, format_summary(line), FONT_BOLD, 10)
