from __future__ import annotations

from io import BytesIO
from typing import Any

import pandas as pd

from widget_export.errors import EncodingError
from widget_export.table.builder import ExportTable

UTF8_BOM = "\ufeff"
CSV_FIELD_SEPARATOR = ";"
CSV_ROW_SEPARATOR = "\n"
DEFAULT_SHEET_NAME = "Sheet1"
DEFAULT_COLUMN_WIDTH = 13.0


def _csv_cell(value: Any) -> Any:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


class TableEncoder:
    extension: str
    media_type: str

    def encode(self, table: ExportTable) -> bytes:
        raise NotImplementedError


class CsvEncoder(TableEncoder):
    extension = "csv"
    media_type = "text/csv;charset=utf-8"

    def encode(self, table: ExportTable) -> bytes:
        frame = pd.DataFrame(
            [[_csv_cell(cell) for cell in row] for row in table.rows],
            columns=table.header,
            dtype=object,
        )
        text = frame.to_csv(
            sep=CSV_FIELD_SEPARATOR,
            lineterminator=CSV_ROW_SEPARATOR,
            index=False,
        )
        # Rows are separator-joined: no terminator after the last one.
        text = text.removesuffix(CSV_ROW_SEPARATOR)
        return (UTF8_BOM + text).encode("utf-8")


class XlsxEncoder(TableEncoder):
    extension = "xlsx"
    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def __init__(
        self,
        sheet_name: str = DEFAULT_SHEET_NAME,
        column_width: float = DEFAULT_COLUMN_WIDTH,
    ) -> None:
        self.sheet_name = sheet_name
        self.column_width = column_width

    def encode(self, table: ExportTable) -> bytes:
        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            table.to_frame().to_excel(writer, sheet_name=self.sheet_name, index=False)
            writer.sheets[self.sheet_name].column_dimensions["A"].width = self.column_width
        return buffer.getvalue()


SUPPORTED_FORMATS = (CsvEncoder.extension, XlsxEncoder.extension)


def normalize_format(fmt: str) -> str:
    return fmt.strip().lstrip(".").lower()


def get_encoder(
    fmt: str,
    *,
    sheet_name: str = DEFAULT_SHEET_NAME,
    column_width: float = DEFAULT_COLUMN_WIDTH,
) -> TableEncoder:
    token = normalize_format(fmt)
    if token == CsvEncoder.extension:
        return CsvEncoder()
    if token == XlsxEncoder.extension:
        return XlsxEncoder(sheet_name=sheet_name, column_width=column_width)
    raise EncodingError(
        f"Unsupported export format: {fmt!r} (expected one of {', '.join(SUPPORTED_FORMATS)})"
    )
