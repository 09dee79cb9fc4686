"""
Tests para statement_ingest.domain.services.format_detector
"""

import pytest

from statement_ingest.domain.exceptions import UnsupportedFormatError
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.services.format_detector import detect_kind


class TestDetectKind:
    @pytest.mark.parametrize(
        "filename, kind",
        [
            ("estado.csv", FileKind.DELIMITED_TEXT),
            ("ESTADO.XLSX", FileKind.SPREADSHEET_MODERN),
            ("estado.xls", FileKind.SPREADSHEET_LEGACY),
            ("Estado.Pdf", FileKind.PAGE_DOCUMENT),
        ],
    )
    def test_por_extension(self, filename, kind):
        assert detect_kind(filename) is kind

    def test_extension_gana_sobre_content_type(self):
        assert detect_kind("estado.csv", "application/pdf") is FileKind.DELIMITED_TEXT

    @pytest.mark.parametrize(
        "content_type, kind",
        [
            ("text/csv; charset=utf-8", FileKind.DELIMITED_TEXT),
            ("application/vnd.ms-excel", FileKind.SPREADSHEET_LEGACY),
            ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", FileKind.SPREADSHEET_MODERN),
            ("application/excel", FileKind.SPREADSHEET_MODERN),
            ("application/pdf", FileKind.PAGE_DOCUMENT),
        ],
    )
    def test_por_content_type(self, content_type, kind):
        assert detect_kind("upload", content_type) is kind

    def test_sin_nombre(self):
        assert detect_kind(None, "application/pdf") is FileKind.PAGE_DOCUMENT

    def test_desconocido(self):
        with pytest.raises(UnsupportedFormatError, match="estado.txt"):
            detect_kind("estado.txt", "text/plain")

    def test_sin_nada(self):
        with pytest.raises(UnsupportedFormatError):
            detect_kind(None, None)
