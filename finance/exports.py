import io
from decimal import Decimal

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from django.http import HttpResponse

from .models import Expense

CENTS = Decimal('0.01')

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

SUMMARY_ROWS = [
    ('Total Revenue', 'total_revenue'),
    ('Total Expenses', 'total_expenses'),
    ('Net Profit', 'net_profit'),
    ('Profit Margin (%)', 'profit_margin'),
    ('Total Orders', 'total_orders'),
]


def _filename(date_range, extension):
    start = date_range.start_date.date().isoformat()
    end = date_range.end_date.date().isoformat()
    return f"profit_report_{start}_{end}.{extension}"


def _autosize(ws):
    for column in ws.columns:
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        # merged title cells have no column_letter
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(width + 2, 50)


def generate_profit_excel(report, date_range, business_name):
    """Workbook with Summary, Daily and Expenses sheets"""
    header_font = Font(bold=True, size=12)
    title_font = Font(bold=True, size=16)
    profit = report['profit']

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws['A1'] = f"{business_name} - Profit Report"
    ws['A1'].font = title_font
    ws['A2'] = f"Period: {date_range.start_date.date()} to {date_range.end_date.date()}"
    ws.merge_cells('A1:D1')
    ws.merge_cells('A2:D2')

    for row, (label, key) in enumerate(SUMMARY_ROWS, 4):
        ws.cell(row=row, column=1, value=label).font = header_font
        value = getattr(profit, key)
        ws.cell(row=row, column=2, value=value if key == 'total_orders' else value.quantize(CENTS))
    _autosize(ws)

    daily = wb.create_sheet("Daily")
    for col, header in enumerate(['Date', 'Revenue', 'Expenses', 'Profit'], 1):
        daily.cell(row=1, column=col, value=header).font = header_font
    for row, point in enumerate(report['trend'], 2):
        daily.cell(row=row, column=1, value=point['date'])
        daily.cell(row=row, column=2, value=point['revenue'])
        daily.cell(row=row, column=3, value=point['expenses'])
        daily.cell(row=row, column=4, value=point['profit'])
    _autosize(daily)

    expenses = wb.create_sheet("Expenses")
    for col, header in enumerate(['Category', 'Amount', 'Share (%)'], 1):
        expenses.cell(row=1, column=col, value=header).font = header_font
    row = 2
    for row, line in enumerate(report['breakdown']['breakdown'], 2):
        expenses.cell(row=row, column=1, value=Expense.Category(line['category']).label)
        expenses.cell(row=row, column=2, value=line['amount'])
        expenses.cell(row=row, column=3, value=line['percentage'].quantize(Decimal('0.1')))
    expenses.cell(row=row + 1, column=1, value="TOTAL").font = header_font
    expenses.cell(row=row + 1, column=2, value=report['breakdown']['total_expenses']).font = header_font
    _autosize(expenses)

    response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{_filename(date_range, "xlsx")}"'
    wb.save(response)
    return response


def _styled_table(data, total_row=False):
    table = Table(data)
    style = [
        ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
        ('GRID', (0, 0), (-1, -1), 1, colors.black),
    ]
    if total_row:
        style += [
            ('BACKGROUND', (0, -1), (-1, -1), colors.lightgrey),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ]
    table.setStyle(TableStyle(style))
    return table


def generate_profit_pdf(report, date_range, business_name, format_money, format_percent):
    """
    PDF version of the profit report.

    Amounts go through ``format_money`` / ``format_percent``; the built-in
    PDF fonts have no rupee glyph, so callers pass a plain-text symbol.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle('ReportTitle', parent=styles['Heading1'], fontSize=18,
                                 spaceAfter=20, alignment=1)
    profit = report['profit']

    story = [
        Paragraph(f"{business_name} - Profit Report", title_style),
        Paragraph(f"Period: {date_range.start_date.date()} to {date_range.end_date.date()}", styles['Heading2']),
        Spacer(1, 12),
    ]

    summary = [['Metric', 'Value']]
    for label, key in SUMMARY_ROWS:
        value = getattr(profit, key)
        if key == 'total_orders':
            summary.append([label, str(value)])
        elif key == 'profit_margin':
            summary.append([label, format_percent(value)])
        else:
            summary.append([label, format_money(value)])
    story += [_styled_table(summary), Spacer(1, 20)]

    story.append(Paragraph("Daily Trend", styles['Heading2']))
    daily = [['Date', 'Revenue', 'Expenses', 'Profit']]
    for point in report['trend']:
        daily.append([point['date'], format_money(point['revenue']),
                      format_money(point['expenses']), format_money(point['profit'])])
    story += [_styled_table(daily), Spacer(1, 20)]

    story.append(Paragraph("Expense Breakdown", styles['Heading2']))
    breakdown = [['Category', 'Amount', 'Share']]
    for line in report['breakdown']['breakdown']:
        breakdown.append([Expense.Category(line['category']).label,
                          format_money(line['amount']), format_percent(line['percentage'])])
    breakdown.append(['Total', format_money(report['breakdown']['total_expenses']), ''])
    story.append(_styled_table(breakdown, total_row=True))

    doc.build(story)

    buffer.seek(0)
    response = HttpResponse(buffer, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{_filename(date_range, "pdf")}"'
    return response
