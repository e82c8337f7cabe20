"""
Export orders to XLSX format.
"""

import logging
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from teleshop.core.orders.models import Order

logger = logging.getLogger(__name__)


class OrderExporter:
    """Export orders to XLSX order sheets for store staff."""

    # Styles
    HEADER_FONT = Font(bold=True, size=14)
    SUBHEADER_FONT = Font(bold=True, size=11)

    HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    HEADER_FONT_WHITE = Font(bold=True, size=11, color="FFFFFF")

    ALT_ROW_FILL = PatternFill(start_color="D9E2F3", end_color="D9E2F3", fill_type="solid")

    THIN_BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    CENTER_ALIGN = Alignment(horizontal='center', vertical='center')
    LEFT_ALIGN = Alignment(horizontal='left', vertical='center')
    RIGHT_ALIGN = Alignment(horizontal='right', vertical='center')
    WRAP_ALIGN = Alignment(horizontal='left', vertical='top', wrap_text=True)

    def __init__(self, output_dir: Path, currency: str = "Toman"):
        self.output_dir = output_dir
        self.currency = currency

    def export(self, order: Order, output_dir: Optional[Path] = None) -> Path:
        """
        Export order to XLSX file.

        Args:
            order: Order to export
            output_dir: Directory for output file (default: configured orders dir)

        Returns:
            Path to created XLSX file
        """
        output_dir = output_dir or self.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)

        filepath = output_dir / f"order_{order.id}.xlsx"

        wb = Workbook()
        ws = wb.active
        ws.title = order.id

        ws.column_dimensions['A'].width = 5
        ws.column_dimensions['B'].width = 35
        ws.column_dimensions['C'].width = 12
        ws.column_dimensions['D'].width = 15
        ws.column_dimensions['E'].width = 15

        row = 1

        # === HEADER ===
        ws.merge_cells(f'A{row}:E{row}')
        cell = ws.cell(row=row, column=1, value=f"ORDER {order.id}")
        cell.font = self.HEADER_FONT
        cell.alignment = self.CENTER_ALIGN
        row += 1

        ws.merge_cells(f'A{row}:E{row}')
        cell = ws.cell(
            row=row,
            column=1,
            value=f"{order.created_at.strftime('%Y-%m-%d %H:%M')} — {order.status.label}",
        )
        cell.alignment = self.CENTER_ALIGN
        row += 2

        # === ITEMS TABLE ===
        headers = ["#", "Product", "Qty", f"Price ({self.currency})", f"Sum ({self.currency})"]
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.HEADER_FONT_WHITE
            cell.fill = self.HEADER_FILL
            cell.border = self.THIN_BORDER
            cell.alignment = self.CENTER_ALIGN
        row += 1

        for i, item in enumerate(order.items, 1):
            values = [i, item.product_name, item.quantity, item.price_at_time, item.total_price]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.THIN_BORDER
                if col == 1:
                    cell.alignment = self.CENTER_ALIGN
                elif col == 2:
                    cell.alignment = self.LEFT_ALIGN
                else:
                    cell.alignment = self.RIGHT_ALIGN
                    if col > 3:
                        cell.number_format = '#,##0'
                if i % 2 == 0:
                    cell.fill = self.ALT_ROW_FILL
            row += 1

        if order.shipping_cost:
            ws.merge_cells(f'A{row}:D{row}')
            ws.cell(row=row, column=1, value=f"Shipping: {order.shipping_method or '-'}").alignment = self.RIGHT_ALIGN
            cell = ws.cell(row=row, column=5, value=order.shipping_cost)
            cell.number_format = '#,##0'
            row += 1

        # Total row
        ws.merge_cells(f'A{row}:D{row}')
        cell = ws.cell(row=row, column=1, value="TOTAL:")
        cell.font = self.SUBHEADER_FONT
        cell.alignment = self.RIGHT_ALIGN
        cell = ws.cell(row=row, column=5, value=order.total_amount)
        cell.font = self.SUBHEADER_FONT
        cell.border = self.THIN_BORDER
        cell.alignment = self.RIGHT_ALIGN
        cell.number_format = '#,##0'
        row += 2

        # === CUSTOMER INFO ===
        ws.cell(row=row, column=1, value="CUSTOMER:").font = self.SUBHEADER_FONT
        row += 1
        for label, value in (
            ("Name:", order.customer_name),
            ("Phone:", order.customer_phone),
            ("Address:", order.customer_address),
        ):
            ws.merge_cells(f'B{row}:E{row}')
            ws.cell(row=row, column=1, value=label)
            cell = ws.cell(row=row, column=2, value=value)
            cell.alignment = self.WRAP_ALIGN
            row += 1

        wb.save(filepath)
        logger.info(f"Order exported to {filepath}")

        return filepath
