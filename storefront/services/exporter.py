"""Exporter — serializes a filtered record set as csv, json, xlsx or pdf.

Invariants:
    - Rows fetched through EntityRepository with id/created_at/updated_at omitted
      unless the caller overrides omit
    - Empty result set raises NoDataError; unknown format raises UnsupportedFormatError
    - Column order is the same for csv, xlsx and pdf (first record's field order)
    - csv and json output is byte-identical for an unchanged result set
    - The same bytes and headers are written into the caller's OutputSink

Design Decisions:
    - csv string cells use the spreadsheet "excel string" form ="value" so
      spreadsheet tools never coerce codes or ids into numbers or dates
    - openpyxl for xlsx, reportlab platypus Table for pdf (A4, 30pt margins)
    - xlsx keeps raw values except those the format cannot hold (uuid, tz-aware
      datetimes), which become text / naive UTC
"""

import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Generic, Iterable
from uuid import UUID

from openpyxl import Workbook
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle

from storefront.core.domain_types import ExportFormat
from storefront.core.errors import NoDataError, UnsupportedFormatError
from storefront.core.repository_protocols import OutputSink
from storefront.services.entity_repository import (
    EntityRepository, ModelT, OrderBy, Predicate,
)

logger = logging.getLogger(__name__)

PDF_MARGIN = 30
CONTENT_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
}


@dataclass(frozen=True)
class ExportResult:
    """Rendered export payload with its wire metadata."""
    content: bytes
    content_type: str
    filename: str


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _excel_string(value: str) -> str:
    """Wrap as ="value"; inner quotes doubled so the formula stays intact."""
    return '="' + value.replace('"', '""') + '"'


def render_csv(rows: list[dict[str, Any]]) -> bytes:
    headers = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        cells = []
        for header in headers:
            value = row.get(header)
            if isinstance(value, bool):
                cells.append(str(value).lower())
            elif isinstance(value, (int, float)):
                cells.append(value)
            elif value is None:
                cells.append("")
            elif isinstance(value, str):
                cells.append(_excel_string(value))
            else:
                cells.append(_text(value))
        writer.writerow(cells)
    return buffer.getvalue().encode("utf-8")


def render_json(rows: list[dict[str, Any]]) -> bytes:
    return json.dumps(
        rows, indent=2, ensure_ascii=False, default=_json_default,
    ).encode("utf-8")


def _xlsx_cell(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def render_xlsx(rows: list[dict[str, Any]], sheet_name: str) -> bytes:
    headers = list(rows[0].keys())
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_name[:31]
    worksheet.append(headers)
    for row in rows:
        worksheet.append([_xlsx_cell(row.get(header)) for header in headers])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def render_pdf(rows: list[dict[str, Any]], title: str) -> bytes:
    headers = list(rows[0].keys())
    data = [headers] + [[_text(row.get(header)) for header in headers] for row in rows]
    buffer = io.BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=PDF_MARGIN,
        rightMargin=PDF_MARGIN,
        topMargin=PDF_MARGIN,
        bottomMargin=PDF_MARGIN,
        title=title,
    )
    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 12),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    document.build([table])
    return buffer.getvalue()


class Exporter(Generic[ModelT]):
    """Exports one entity's records into an output sink."""

    def __init__(self, repository: EntityRepository[ModelT]):
        self.repository = repository

    @property
    def name(self) -> str:
        return self.repository.name

    def _resolve_format(self, export_format: str | ExportFormat) -> ExportFormat:
        try:
            return ExportFormat(str(getattr(export_format, "value", export_format)).lower())
        except ValueError:
            raise UnsupportedFormatError(str(export_format))

    def render(self, fmt: ExportFormat, rows: list[dict[str, Any]]) -> bytes:
        if fmt is ExportFormat.CSV:
            return render_csv(rows)
        if fmt is ExportFormat.JSON:
            return render_json(rows)
        if fmt is ExportFormat.XLSX:
            return render_xlsx(rows, self.name)
        return render_pdf(rows, self.name)

    async def export(
        self,
        export_format: str | ExportFormat,
        sink: OutputSink,
        predicate: Predicate | None = None,
        *,
        take: int | None = None,
        skip: int | None = None,
        order_by: OrderBy | None = None,
        omit: Iterable[str] | None = None,
    ) -> ExportResult:
        fmt = self._resolve_format(export_format)
        rows = await self.repository.fetch_rows(
            predicate, take=take, skip=skip, order_by=order_by, omit=omit,
        )
        if not rows:
            raise NoDataError(self.name)

        result = ExportResult(
            content=self.render(fmt, rows),
            content_type=CONTENT_TYPES[fmt],
            filename=f"{self.name}.{fmt.value}",
        )
        sink.set_header("Content-Type", result.content_type)
        sink.set_header(
            "Content-Disposition", f"attachment; filename={result.filename}",
        )
        sink.write(result.content)
        logger.info(
            f"Exported {len(rows)} {self.name} record(s) as {fmt.value}",
            extra={"entity": self.name, "export_format": fmt.value},
        )
        return result
