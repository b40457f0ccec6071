"""
CSV and PDF export of order lists and reports.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fpdf import FPDF

from ..core.utils import format_currency
from .models import ReportData

HEADER_FILL = (59, 130, 246)


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str) and ("," in value or '"' in value):
        return '"' + value.replace('"', '""') + '"'
    return str(value)


def to_csv(data: List[Dict[str, Any]]) -> str:
    """
    Rows -> CSV text. Columns come from the first row's keys.

    Strings containing commas or quotes are quoted with quotes doubled.
    """
    if not data:
        return ""

    headers = list(data[0].keys())
    lines = [",".join(headers)]
    for row in data:
        lines.append(",".join(_csv_value(row.get(h)) for h in headers))
    return "\n".join(lines)


def report_filename(
    store_name: str,
    period: str,
    ext: str,
    today: Optional[date] = None,
) -> str:
    """``My_Store_weekly_report_2024-01-07.pdf``"""
    today = today or date.today()
    return f"{'_'.join(store_name.split())}_{period}_report_{today.strftime('%Y-%m-%d')}.{ext}"


def report_to_csv(report: ReportData) -> str:
    """Report as three CSV sections: summary, top products and categories."""
    summary = report.summary
    summary_lines = [
        f"Period,{report.period}",
        f"Start Date,{report.start_date}",
        f"End Date,{report.end_date}",
        f"Total Orders,{summary.total_orders}",
        f"Total Revenue,{summary.total_revenue:.2f}",
        f"Total Customers,{summary.total_customers}",
        f"Average Order Value,{summary.average_order_value:.2f}",
    ]

    top_products = [
        {
            "Product": p.name,
            "Category": p.category,
            "Units Sold": p.total_sales,
            "Revenue": f"{p.total_revenue:.2f}",
            "Order Count": p.order_count,
        }
        for p in report.top_products
    ]

    categories = [
        {
            "Category": c.category,
            "Units Sold": c.total_sales,
            "Revenue": f"{c.total_revenue:.2f}",
            "Order Count": c.order_count,
            "Percentage": f"{c.percentage:.2f}",
        }
        for c in report.category_breakdown
    ]

    return "\n".join([
        "SUMMARY",
        *summary_lines,
        "",
        "TOP PRODUCTS",
        to_csv(top_products),
        "",
        "CATEGORY BREAKDOWN",
        to_csv(categories),
    ])


def _latin1(text: str) -> str:
    # Core PDF fonts are latin-1 only
    return text.replace("₹", "Rs. ").encode("latin-1", "replace").decode("latin-1")


def _table(pdf: FPDF, header: List[str], body: List[List[str]], widths: List[int]) -> None:
    pdf.set_font("Helvetica", "B", 10)
    pdf.set_fill_color(*HEADER_FILL)
    pdf.set_text_color(255, 255, 255)
    for text, width in zip(header, widths):
        pdf.cell(width, 8, _latin1(text), border=1, fill=True)
    pdf.ln(8)

    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(0, 0, 0)
    for row in body:
        for text, width in zip(row, widths):
            pdf.cell(width, 7, _latin1(text), border=1)
        pdf.ln(7)


def report_to_pdf(
    report: ReportData,
    store_name: str = "Store",
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render the report as a PDF document and return its bytes."""
    generated_at = generated_at or datetime.now()
    start = datetime.strptime(report.start_date, "%Y-%m-%d")
    end = datetime.strptime(report.end_date, "%Y-%m-%d")

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 12, _latin1(f"{store_name} - {report.period.upper()} Report"))
    pdf.ln(12)

    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 7, f"Period: {start:%b} {start.day}, {start.year} - {end:%b} {end.day}, {end.year}")
    pdf.ln(7)
    pdf.cell(0, 7, f"Generated: {generated_at:%b} {generated_at.day}, {generated_at:%Y %H:%M}")
    pdf.ln(12)

    summary = report.summary
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Summary")
    pdf.ln(10)
    _table(pdf, ["Metric", "Value"], [
        ["Total Orders", str(summary.total_orders)],
        ["Total Revenue", format_currency(summary.total_revenue)],
        ["Total Customers", str(summary.total_customers)],
        ["Average Order Value", format_currency(summary.average_order_value)],
    ], [90, 90])
    pdf.ln(8)

    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Top Products")
    pdf.ln(10)
    _table(pdf, ["Product", "Category", "Units Sold", "Revenue"], [
        [p.name, p.category, str(p.total_sales), format_currency(p.total_revenue)]
        for p in report.top_products
    ], [70, 45, 30, 35])
    pdf.ln(8)

    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Category Breakdown")
    pdf.ln(10)
    _table(pdf, ["Category", "Units Sold", "Revenue", "% of Total"], [
        [c.category, str(c.total_sales), format_currency(c.total_revenue), f"{c.percentage:.1f}%"]
        for c in report.category_breakdown
    ], [70, 30, 45, 35])

    return bytes(pdf.output())
