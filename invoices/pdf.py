"""
Invoice PDF rendering.

Both invoice kinds share one layout: company block, invoice meta, party
block, line table and totals. Vendor invoices list the lines of the bill the
payment settles; client invoices carry a single line for the payment.
"""

import io

from django.conf import settings
from django.utils import timezone

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

ACCENT = colors.HexColor('#1565C0')


def _money(value):
    return f"Rs. {value:,.2f}"


def _styles():
    styles = getSampleStyleSheet()
    return {
        'title': ParagraphStyle('InvoiceTitle', parent=styles['Heading1'], fontSize=16, alignment=TA_CENTER),
        'company': ParagraphStyle('Company', parent=styles['Normal'], fontSize=12, alignment=TA_CENTER),
        'small': ParagraphStyle('Small', parent=styles['Normal'], fontSize=9, alignment=TA_CENTER),
        'normal': styles['Normal'],
        'right': ParagraphStyle('Right', parent=styles['Normal'], alignment=TA_RIGHT),
        'footer': ParagraphStyle(
            'Footer', parent=styles['Normal'], fontSize=8, alignment=TA_CENTER, textColor=colors.grey
        ),
    }


def _line_table(rows):
    table = Table(rows, colWidths=[1.2 * cm, 6.8 * cm, 2 * cm, 2.5 * cm, 2.5 * cm, 3 * cm], repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ('TOPPADDING', (0, 0), (-1, -1), 5),
    ]))
    return table


def _totals_table(invoice):
    rows = [
        ['Taxable Value', _money(invoice.taxable_value)],
        [f"GST ({invoice.gst_percent}%)", _money(invoice.gst_amount)],
        ['Total', _money(invoice.total_amount)],
    ]
    table = Table(rows, colWidths=[4 * cm, 4 * cm], hAlign='RIGHT')
    table.setStyle(TableStyle([
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('LINEABOVE', (0, -1), (-1, -1), 1, colors.black),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
    ]))
    return table


def _render(invoice, heading, party_rows, line_rows):
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.5 * cm,
        leftMargin=1.5 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
        title=f"Invoice {invoice.invoice_no}",
    )
    styles = _styles()

    elements = [
        Paragraph(f"<b>{settings.COMPANY_NAME}</b>", styles['company']),
    ]
    if settings.COMPANY_ADDRESS:
        elements.append(Paragraph(settings.COMPANY_ADDRESS, styles['small']))
    tax_ids = ' | '.join(
        f"{label}: {value}"
        for label, value in (('GSTIN', settings.COMPANY_GSTIN), ('PAN', settings.COMPANY_PAN))
        if value
    )
    if tax_ids:
        elements.append(Paragraph(tax_ids, styles['small']))

    elements.append(Spacer(1, 10))
    elements.append(Paragraph(heading, styles['title']))
    elements.append(HRFlowable(width='100%', thickness=1, color=ACCENT))
    elements.append(Spacer(1, 10))

    invoice_date = timezone.localtime(invoice.invoice_date).strftime('%d-%m-%Y')
    meta = Table(
        [['Invoice No', invoice.invoice_no], ['Invoice Date', invoice_date], *party_rows],
        colWidths=[4 * cm, 12 * cm],
    )
    meta.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements.append(meta)
    elements.append(Spacer(1, 15))

    header = ['#', 'Description', 'HSN', 'Qty (Kg)', 'Rate', 'Amount']
    elements.append(_line_table([header, *line_rows]))
    elements.append(Spacer(1, 10))
    elements.append(_totals_table(invoice))

    elements.append(Spacer(1, 30))
    elements.append(HRFlowable(width='100%', thickness=0.5, color=colors.grey))
    elements.append(Paragraph(
        f"Computer generated invoice | {settings.COMPANY_NAME}",
        styles['footer'],
    ))

    doc.build(elements)
    buffer.seek(0)
    return buffer.read()


def render_client_invoice(invoice):
    party_rows = [
        ['Client', invoice.client_name],
        ['Bill To', Paragraph(invoice.bill_to.replace('\n', '<br/>'), _styles()['normal'])],
    ]
    line_rows = [[
        '1',
        Paragraph(invoice.description, _styles()['normal']),
        invoice.hsn,
        '',
        '',
        _money(invoice.taxable_value),
    ]]
    return _render(invoice, 'TAX INVOICE', party_rows, line_rows)


def render_vendor_invoice(invoice):
    party_rows = [['Vendor', invoice.vendor_name]]
    if invoice.vendor_address:
        party_rows.append(['Address', invoice.vendor_address])

    loading = invoice.payment.loading
    line_rows = []
    if loading is not None:
        for index, item in enumerate(loading.items.select_related('variety'), start=1):
            line_rows.append([
                str(index),
                item.variety.name or item.variety_id,
                invoice.hsn,
                f"{item.total_kgs:,.3f}",
                f"{item.price_per_kg:,.2f}",
                _money(item.total_price),
            ])
    if not line_rows:
        line_rows.append(['1', invoice.description or 'Fish', invoice.hsn, '', '', _money(invoice.taxable_value)])

    return _render(invoice, 'PURCHASE INVOICE', party_rows, line_rows)
