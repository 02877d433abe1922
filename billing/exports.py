"""
Excel exports of vendor and client bills.

One row per bill line, followed by a bold bill total row.
"""

import io

from django.http import HttpResponse
from django.utils import timezone

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

HEADER_FONT = Font(bold=True, size=11, color='FFFFFF')
HEADER_FILL = PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid')
TOTAL_FONT = Font(bold=True)
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)

BILL_COLUMNS = [
    ('Bill No', 16),
    ('Date', 12),
    ('Party', 24),
    ('Village', 16),
    ('Vehicle', 14),
    ('Variety', 10),
    ('Trays', 8),
    ('Loose (Kg)', 11),
    ('Total (Kg)', 11),
    ('Price/Kg', 10),
    ('Amount', 14),
]


def _write_header(ws, title):
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(BILL_COLUMNS))
    ws.cell(row=1, column=1, value=title).font = Font(bold=True, size=14)
    ws.cell(row=2, column=1, value=f"Generated: {timezone.localtime().strftime('%Y-%m-%d %H:%M')}")

    for col, (label, width) in enumerate(BILL_COLUMNS, start=1):
        cell = ws.cell(row=4, column=col, value=label)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal='center')
        ws.column_dimensions[get_column_letter(col)].width = width
    return 5


def _write_bills(ws, loadings, row):
    for loading in loadings:
        date = timezone.localtime(loading.date).strftime('%Y-%m-%d') if loading.date else ''
        for item in loading.items.all():
            values = [
                loading.bill_no,
                date,
                loading.party_name,
                loading.village,
                loading.vehicle_number,
                item.variety_id,
                item.no_trays,
                float(item.loose),
                float(item.total_kgs),
                float(item.price_per_kg),
                float(item.total_price),
            ]
            for col, value in enumerate(values, start=1):
                ws.cell(row=row, column=col, value=value).border = THIN_BORDER
            row += 1

        ws.cell(row=row, column=1, value=f"{loading.bill_no} total").font = TOTAL_FONT
        ws.cell(row=row, column=7, value=loading.total_trays).font = TOTAL_FONT
        ws.cell(row=row, column=9, value=float(loading.total_kgs)).font = TOTAL_FONT
        ws.cell(row=row, column=11, value=float(loading.total_price)).font = TOTAL_FONT
        row += 2
    return row


def build_vendor_bills_workbook(farmer_loadings, agent_loadings):
    wb = Workbook()

    ws_farmer = wb.active
    ws_farmer.title = 'Farmer Bills'
    _write_bills(ws_farmer, farmer_loadings, _write_header(ws_farmer, 'Farmer Bills'))

    ws_agent = wb.create_sheet('Agent Bills')
    _write_bills(ws_agent, agent_loadings, _write_header(ws_agent, 'Agent Bills'))

    return wb


def build_client_bills_workbook(client_loadings):
    wb = Workbook()
    ws = wb.active
    ws.title = 'Client Bills'
    _write_bills(ws, client_loadings, _write_header(ws, 'Client Bills'))
    return wb


def workbook_response(wb, prefix):
    output = io.BytesIO()
    wb.save(output)
    output.seek(0)

    filename = f"{prefix}_{timezone.localdate().strftime('%Y%m%d')}.xlsx"
    response = HttpResponse(output.read(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
