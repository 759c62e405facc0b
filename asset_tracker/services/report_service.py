"""Экспорт дашборда в Excel: метаданные, сводка и разбивка чистого движения по записям."""
from datetime import datetime
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment
from openpyxl.utils import get_column_letter

from asset_tracker.constants import transfer_status_label
from asset_tracker.schemas.dashboard import DashboardFilter, DashboardMetrics
from asset_tracker.schemas.records import PurchaseOut, TransferOut

PURCHASE_HEADERS = ["ID", "Date", "Equipment", "Base", "Quantity", "Unit cost", "Total cost", "Supplier", "PO number"]
TRANSFER_HEADERS = ["ID", "Date", "Equipment", "From", "To", "Quantity", "Status", "Reason"]


def _header_row(ws, headers: list[str]) -> None:
    for col, title in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=title)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", wrap_text=True)
    for c in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(c)].width = 18


def _equipment(record) -> str:
    return (record.asset.get("equipment_type") or {}).get("name") or record.equipment_type_id


def _filter_description(f: DashboardFilter) -> str:
    parts = [f"period: {f.date_range.start.isoformat()} to {f.date_range.end.isoformat()}"]
    if f.base_id:
        parts.append(f"base: {f.base_id}")
    if f.equipment_type_id:
        parts.append(f"equipment type: {f.equipment_type_id}")
    return "; ".join(parts)


def _purchases_sheet(wb: Workbook, purchases: list[PurchaseOut]) -> None:
    ws = wb.create_sheet("Purchases")
    _header_row(ws, PURCHASE_HEADERS)
    for row_idx, p in enumerate(purchases, 2):
        values = [
            p.id,
            p.purchase_date.isoformat(),
            _equipment(p),
            p.receiving_base.get("name") or p.receiving_base_id,
            p.quantity,
            float(p.unit_cost),
            float(p.total_cost),
            p.supplier_info,
            p.purchase_order_number or "—",
        ]
        for col, value in enumerate(values, 1):
            ws.cell(row=row_idx, column=col, value=value)


def _transfers_sheet(wb: Workbook, title: str, transfers: list[TransferOut]) -> None:
    ws = wb.create_sheet(title)
    _header_row(ws, TRANSFER_HEADERS)
    for row_idx, t in enumerate(transfers, 2):
        values = [
            t.id,
            t.transfer_date.isoformat(),
            _equipment(t),
            t.source_base.get("name") or t.source_base_id,
            t.destination_base.get("name") or t.destination_base_id,
            t.quantity,
            transfer_status_label(t.status),
            t.reason,
        ]
        for col, value in enumerate(values, 1):
            ws.cell(row=row_idx, column=col, value=value)


def build_dashboard_xlsx(
    metrics: DashboardMetrics,
    filters: DashboardFilter,
    generated_by: str,
    generated_at: datetime,
) -> BytesIO:
    """
    Книга Excel: «Metadata» (кто, когда, фильтры), «Summary» (показатели карточек)
    и по листу на каждый список разбивки.
    """
    wb = Workbook()
    meta = wb.active
    meta.title = "Metadata"
    meta.cell(row=1, column=1, value="Generated at")
    meta.cell(row=1, column=2, value=generated_at.strftime("%Y-%m-%d %H:%M:%S UTC"))
    meta.cell(row=2, column=1, value="Generated by")
    meta.cell(row=2, column=2, value=generated_by or "—")
    meta.cell(row=3, column=1, value="Filters")
    meta.cell(row=3, column=2, value=_filter_description(filters))
    for r in range(1, 4):
        meta.cell(row=r, column=1).font = Font(bold=True)
    meta.column_dimensions["A"].width = 18
    meta.column_dimensions["B"].width = 48

    breakdown = metrics.net_movement_breakdown
    summary = wb.create_sheet("Summary")
    rows = [
        ("Opening balance", metrics.opening_balance),
        ("Closing balance", metrics.closing_balance),
        ("Net movement", metrics.net_movement),
        ("Assigned assets", metrics.assigned_assets),
        ("Expended assets", metrics.expended_assets),
        ("Purchases", breakdown.total_purchases),
        ("Transfers in", breakdown.total_transfers_in),
        ("Transfers out", breakdown.total_transfers_out),
    ]
    for row_idx, (label, value) in enumerate(rows, 1):
        summary.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        summary.cell(row=row_idx, column=2, value=value)
    summary.column_dimensions["A"].width = 20

    _purchases_sheet(wb, breakdown.purchases)
    _transfers_sheet(wb, "Transfers in", breakdown.transfers_in)
    _transfers_sheet(wb, "Transfers out", breakdown.transfers_out)

    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf
