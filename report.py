"""PDF load report for an appliance selection."""

import logging
from datetime import datetime
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.shapes import Drawing, String
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from constants import COMPANY_NAME, DEFAULT_BATTERY, POWER_FACTOR, REPORT_TITLE, SAFETY_MARGIN
from utils import build_load_table, calculate_battery_backup, calculate_load, load_by_category

_LOGGER = logging.getLogger(__name__)

KEY_VALUE_STYLE = TableStyle([
    ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
    ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#f5f5f5')),
    ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
    ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.grey),
    ('PADDING', (0, 0), (-1, -1), 6),
])


def report_filename(when=None) -> str:
    when = when or datetime.now()
    return f"inverter_load_report_{when.strftime('%Y%m%d_%H%M')}.pdf"


def create_load_chart(category_totals: dict) -> Drawing:
    """Bar chart of running watts per appliance category."""

    drawing = Drawing(170*mm, 70*mm)

    chart = VerticalBarChart()
    chart.x = 20*mm
    chart.y = 12*mm
    chart.width = 130*mm
    chart.height = 45*mm

    chart.data = [list(category_totals.values())]
    chart.categoryAxis.categoryNames = [name.replace(" ", "\n", 1) for name in category_totals]
    chart.categoryAxis.labels.fontSize = 7
    chart.categoryAxis.labels.dy = -5

    chart.valueAxis.valueMin = 0
    chart.valueAxis.labels.fontSize = 8
    chart.valueAxis.labelTextFormat = '%d W'

    chart.bars[0].fillColor = colors.HexColor('#00B4A0')
    chart.bars.symbol = None

    drawing.add(chart)

    title = String(chart.x + chart.width / 2, chart.y + chart.height + 8*mm, 'Running Load by Category')
    title.fontSize = 10
    title.fontName = 'Helvetica-Bold'
    title.textAnchor = 'middle'
    drawing.add(title)

    return drawing


def generate_load_report_pdf(
    state,
    battery: dict = None,
    company_name: str = COMPANY_NAME,
    report_ref: str = None
) -> bytes:
    """Generate the inverter load report for a selection.

    Returns PDF as bytes.
    """
    battery = {**DEFAULT_BATTERY, **(battery or {})}

    # --- Calculations ---
    result = calculate_load(state)
    rows = build_load_table(state)
    backup = calculate_battery_backup(
        result["total_load"],
        voltage=battery["voltage"],
        capacity_ah=battery["capacity_ah"],
        count=battery["count"],
        dod=battery["dod"],
    )

    # --- PDF Generation ---
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20*mm,
        leftMargin=20*mm,
        topMargin=20*mm,
        bottomMargin=20*mm,
        title=REPORT_TITLE,
    )

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name='CompanyName',
        parent=styles['Heading1'],
        fontSize=22,
        textColor=colors.HexColor('#00B4A0'),
        spaceAfter=5*mm
    ))
    styles.add(ParagraphStyle(
        name='ReportTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor('#1a1a2e'),
        alignment=TA_CENTER,
        spaceBefore=5*mm,
        spaceAfter=8*mm
    ))
    styles.add(ParagraphStyle(
        name='SectionHeader',
        parent=styles['Heading2'],
        fontSize=14,
        textColor=colors.HexColor('#00B4A0'),
        spaceBefore=8*mm,
        spaceAfter=4*mm
    ))
    styles.add(ParagraphStyle(
        name='BodyTextRight',
        parent=styles['Normal'],
        alignment=TA_RIGHT
    ))
    styles.add(ParagraphStyle(
        name='Footer',
        parent=styles['Normal'],
        fontSize=8,
        textColor=colors.grey,
        alignment=TA_CENTER
    ))

    elements = []
    now = datetime.now()

    # --- Header ---
    if report_ref is None:
        report_ref = f"R-{now.strftime('%Y%m%d-%H%M%S')}"

    header_table = Table(
        [[Paragraph(f"<b>{escape(company_name)}</b>", styles['CompanyName']),
          Paragraph(f"Report Ref: {escape(report_ref)}<br/>Date: {now.strftime('%d %B %Y')}", styles['BodyTextRight'])]],
        colWidths=[100*mm, 70*mm]
    )
    header_table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))
    elements.append(header_table)
    elements.append(Paragraph(REPORT_TITLE, styles['ReportTitle']))

    # --- Summary ---
    elements.append(Paragraph("Power Requirements Summary", styles['SectionHeader']))

    backup_hours = backup["backup_hours"]
    summary_data = [
        ["Total Load:", f"{result['total_load']:,} W"],
        ["Peak Surge (worst single startup):", f"{result['peak_surge']:,} W"],
        ["Surge Allowance Applied:", f"{result['adjusted_surge']:,} W"],
        ["Required Power:", f"{result['required_power']:,} W"],
        ["Required Capacity:", f"{result['required_kva']} kVA"],
        ["Recommended Inverter:", f"{result['recommended_inverter']} kVA"],
        ["Estimated Backup:", f"{backup_hours} hours" if backup_hours is not None else "-"],
    ]
    summary_table = Table(summary_data, colWidths=[70*mm, 100*mm])
    summary_table.setStyle(KEY_VALUE_STYLE)
    summary_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 5), (-1, 5), colors.HexColor('#00B4A0')),
        ('TEXTCOLOR', (0, 5), (-1, 5), colors.white),
        ('FONTNAME', (0, 5), (-1, 5), 'Helvetica-Bold'),
    ]))
    elements.append(summary_table)

    # --- Selected Appliances ---
    elements.append(Paragraph("Selected Appliances", styles['SectionHeader']))

    if rows:
        appliance_data = [["Appliance", "Wattage", "Qty", "Total"]]
        for row in rows:
            appliance_data.append([
                row["name"] + (" (custom)" if row["custom"] else ""),
                f"{row['wattage']:,} W",
                str(row["quantity"]),
                f"{row['total_watts']:,} W",
            ])
        appliance_table = Table(appliance_data, colWidths=[85*mm, 30*mm, 20*mm, 35*mm], repeatRows=1)
        appliance_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f5f5f5')),
            ('LINEBELOW', (0, 0), (-1, -1), 0.25, colors.grey),
            ('PADDING', (0, 0), (-1, -1), 5),
        ]))
        elements.append(appliance_table)
        elements.append(Spacer(1, 5*mm))
        elements.append(create_load_chart(load_by_category(rows)))
    else:
        elements.append(Paragraph("No appliances selected.", styles['Normal']))

    # --- Battery ---
    elements.append(Paragraph("Battery Configuration", styles['SectionHeader']))

    battery_data = [
        ["Bank Voltage:", f"{battery['voltage']} V"],
        ["Battery Capacity:", f"{battery['capacity_ah']} Ah"],
        ["Number of Batteries:", str(battery["count"])],
        ["Depth of Discharge:", f"{battery['dod']:.0%}"],
        ["Total Usable Energy:", f"{backup['usable_kwh']} kWh"],
    ]
    battery_table = Table(battery_data, colWidths=[70*mm, 100*mm])
    battery_table.setStyle(KEY_VALUE_STYLE)
    elements.append(battery_table)

    # --- Warnings & Recommendations ---
    if result["warnings"]:
        elements.append(Paragraph("Warnings", styles['SectionHeader']))
        warning_table = Table([[Paragraph(f"• {escape(w)}", styles['Normal'])] for w in result["warnings"]],
                              colWidths=[170*mm])
        warning_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#fff3cd')),
            ('LINEBEFORE', (0, 0), (0, -1), 3, colors.HexColor('#ffc107')),
            ('PADDING', (0, 0), (-1, -1), 5),
        ]))
        elements.append(warning_table)

    if result["recommendations"]:
        elements.append(Paragraph("Recommendations", styles['SectionHeader']))
        rec_table = Table([[Paragraph(f"• {escape(r)}", styles['Normal'])] for r in result["recommendations"]],
                          colWidths=[170*mm])
        rec_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#d4edda')),
            ('LINEBEFORE', (0, 0), (0, -1), 3, colors.HexColor('#28a745')),
            ('PADDING', (0, 0), (-1, -1), 5),
        ]))
        elements.append(rec_table)

    # --- Disclaimer ---
    elements.append(Spacer(1, 10*mm))
    disclaimer = f"""
    <font size=9>
    <b>Disclaimer:</b> This report provides estimates for planning purposes only.
    Actual power consumption may vary based on appliance efficiency, usage patterns and
    environmental conditions. Always consult a qualified installer for professional sizing.
    Calculations include a {SAFETY_MARGIN - 1:.0%} safety margin and assume a power factor of {POWER_FACTOR}.
    </font>
    """
    elements.append(Paragraph(disclaimer, styles['Normal']))

    # --- Footer ---
    elements.append(Spacer(1, 15*mm))
    elements.append(Paragraph(
        f"{escape(company_name)} | Report generated on {now.strftime('%d/%m/%Y at %H:%M')}",
        styles['Footer']
    ))

    doc.build(elements)
    _LOGGER.info("Built load report %s (%d items, %s kVA)", report_ref, len(rows), result["recommended_inverter"])

    return buffer.getvalue()


def generate_sample_report(filename="sample_load_report.pdf"):
    """Write a sample report for a typical home selection."""
    from selection import initial_state, set_quantity, set_variant_quantity

    state = initial_state()
    state = set_variant_quantity(state, "led_bulb", "led_15w", 6)
    state = set_variant_quantity(state, "led_tv", "tv_43", 1)
    state = set_quantity(state, "ceiling_fan", 2)
    state = set_quantity(state, "router", 1)
    state = set_variant_quantity(state, "air_conditioner", "ac_1hp_inv", 1)
    state = set_variant_quantity(state, "refrigerator", "top_bottom_freezer", 1)

    pdf_bytes = generate_load_report_pdf(state, report_ref="R-SAMPLE")
    with open(filename, 'wb') as f:
        f.write(pdf_bytes)

    print(f"Generated: {filename}")
    return filename


if __name__ == "__main__":
    generate_sample_report()
