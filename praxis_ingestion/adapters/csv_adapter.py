"""
Delimited-text grid reader.

Uses csv.reader. Bytes are decoded as UTF-8 with the BOM stripped, falling
back to cp1252 for exports saved by older spreadsheet tools. The delimiter is
sniffed among comma, semicolon and tab when not given.
"""

from __future__ import annotations

import csv
import io

from praxis_ingestion.exceptions import StructuralError

_FALLBACK_ENCODING = "cp1252"
_SNIFF_DELIMITERS = ",;\t"


def decode_text(content: bytes, encoding: str = "utf-8") -> str:
    """Decode file bytes; utf-8 strips a leading BOM."""
    enc = "utf-8-sig" if encoding.lower() in ("utf-8", "utf8") else encoding
    try:
        return content.decode(enc)
    except UnicodeDecodeError:
        if enc == _FALLBACK_ENCODING:
            raise StructuralError(f"Content is not valid {encoding} text") from None
    try:
        return content.decode(_FALLBACK_ENCODING)
    except UnicodeDecodeError as e:
        raise StructuralError(f"Content is not valid {encoding} or {_FALLBACK_ENCODING} text") from e


def _sniff_delimiter(text: str) -> str:
    first_line = text.split("\n", 1)[0]
    try:
        return csv.Sniffer().sniff(first_line, delimiters=_SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


class CsvGridReader:
    """Read delimited text into physical rows of stripped cell strings."""

    def __init__(self, delimiter: str | None = None, encoding: str = "utf-8"):
        self._delimiter = delimiter
        self._encoding = encoding

    def read_grid(self, content: bytes | str) -> list[list[str]]:
        text = decode_text(content, self._encoding) if isinstance(content, bytes) else content
        if text.startswith("\ufeff"):
            text = text[1:]
        delimiter = self._delimiter or _sniff_delimiter(text)
        try:
            reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
            return [[cell.strip() for cell in row] for row in reader]
        except csv.Error as e:
            raise StructuralError(f"Malformed delimited text: {e}") from e
