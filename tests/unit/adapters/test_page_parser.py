"""
Tests para el parser de PDF.

Usan un extractor falso que devuelve páginas fijas, así que no dependen
de pdfplumber ni de archivos en disco.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from statement_ingest.adapters.input.statement_parsers.page_parser import (
    PageStatementParser,
    compile_line_pattern,
    slice_table,
)
from statement_ingest.domain.exceptions import AccountNumberRequiredError, ConfigurationError
from statement_ingest.domain.models.bank_config import (
    AccountConfig,
    BankParsingConfig,
    PageTableConfig,
    ReferenceConfig,
    ReferenceField,
)
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.page_text import PageText
from statement_ingest.domain.models.row_outcome import SkipReason
from statement_ingest.domain.ports.text_extractor import TextExtractor

PAGE_1 = """KGB Bank
Account No : 1234 5678 9012
Date Narration Credit Balance
01/01/2024 ORDER1/UTR1 500.00 1,500.00
02/01/2024 ORDER2/UTR2 0.00 1,500.00"""

PAGE_2 = """Date Narration Credit Balance
03/01/2024 ORDER3/UTR3 250.50 1,750.50
Closing Balance 1,750.50
Page 2 of 2"""

LINE = r"(?<date>\d{2}/\d{2}/\d{4}) (?<ref>\S+) (?<credit>[\d,.]+) (?<balance>[\d,.]+)"


class FakeExtractor(TextExtractor):
    def __init__(self, pages, handles=True):
        self._pages = pages
        self._handles = handles

    @property
    def name(self):
        return "falso"

    def can_handle(self, kind):
        return self._handles and kind is FileKind.PAGE_DOCUMENT

    def extract(self, content, file_name=""):
        return [PageText(page_num=i, text=text) for i, text in enumerate(self._pages, start=1)]


def _config(**table) -> BankParsingConfig:
    return BankParsingConfig(
        page_table=PageTableConfig(line_pattern=LINE, **table),
        reference=ReferenceConfig(splitter="/", order_id=ReferenceField(0), utr=ReferenceField(1)),
    )


@pytest.fixture
def parser():
    return PageStatementParser(FakeExtractor([PAGE_1, PAGE_2]))


class TestCompileLinePattern:
    def test_traduce_grupos_nombrados(self):
        pattern = compile_line_pattern(r"(?<date>\S+) (?<ref>\S+)")
        assert set(pattern.groupindex) == {"date", "ref"}

    def test_no_toca_lookbehind(self):
        pattern = compile_line_pattern(r"(?<=A)(?<!B)(?P<ref>\d+)")
        assert pattern.search("A123").group("ref") == "123"

    def test_patron_invalido(self):
        with pytest.raises(ConfigurationError, match="linePattern"):
            compile_line_pattern(r"(?<date>\d+")


class TestSliceTable:
    def test_recorta_entre_marcadores(self):
        text = "cabecera\nINICIO\nfila 1\nfila 2\nFIN\npie"
        table = PageTableConfig(line_pattern=".*", start_after_regex="^INICIO$", stop_before_regex="^FIN$")
        assert slice_table(text, table) == "\nfila 1\nfila 2\n"

    def test_marcador_ausente_no_recorta(self):
        table = PageTableConfig(line_pattern=".*", start_after_regex="^NO EXISTE$")
        assert slice_table("a\nb", table) == "a\nb"


class TestPageStatementParser:
    def test_extractor_incompatible(self):
        with pytest.raises(ValueError, match="falso"):
            PageStatementParser(FakeExtractor([], handles=False))

    def test_filas_de_todas_las_paginas(self, parser):
        outcomes = parser.parse(b"%PDF", "estado.pdf", _config())
        rows = [o.row for o in outcomes if o.kept]

        assert [r.reference for r in rows] == ["ORDER1/UTR1", "ORDER3/UTR3"]
        assert rows[0].transaction_datetime == datetime(2024, 1, 1)
        assert rows[0].amount == Decimal("500.00")
        assert rows[0].balance == Decimal("1500.00")
        assert rows[0].utr == "UTR1"
        assert rows[1].amount == Decimal("250.50")

    def test_lineas_sin_coincidencia_se_descartan(self, parser):
        outcomes = parser.parse(b"%PDF", "estado.pdf", _config())
        skipped = [o for o in outcomes if o.skip_reason is SkipReason.NO_LINE_MATCH]
        assert "Closing Balance 1,750.50" in [o.detail for o in skipped]
        assert "KGB Bank" in [o.detail for o in skipped]

    def test_monto_cero_se_descarta(self, parser):
        outcomes = parser.parse(b"%PDF", "estado.pdf", _config())
        zero = [o for o in outcomes if o.skip_reason is SkipReason.NON_POSITIVE_AMOUNT]
        assert len(zero) == 1

    def test_recorte_de_tabla(self, parser):
        config = _config(start_after_regex=r"^Date Narration Credit Balance$", stop_before_regex=r"^Closing")
        outcomes = parser.parse(b"%PDF", "estado.pdf", config)
        assert not [o for o in outcomes if o.detail == "KGB Bank"]
        assert not [o for o in outcomes if o.detail.startswith("Page")]

    def test_cuenta_en_el_texto(self, parser):
        config = _config(account_regex=r"Account No\s*:\s*([\d ]+)$")
        rows = [o.row for o in parser.parse(b"%PDF", "estado.pdf", config) if o.kept]
        assert rows[0].account_no == "123456789012"

    def test_cuenta_del_llamador_sin_digitos_usa_texto(self, parser):
        config = _config(account_regex=r"Account No\s*:\s*([\d ]+)$")
        outcomes = parser.parse(b"%PDF", "estado.pdf", config, account_no_override=" - ")
        rows = [o.row for o in outcomes if o.kept]
        assert rows[0].account_no == "123456789012"

    def test_regex_de_cuenta_propio_tiene_prioridad(self, parser):
        config = BankParsingConfig(
            page_table=PageTableConfig(line_pattern=LINE, account_regex=r"NO COINCIDE (\d+)"),
            account=AccountConfig(text_regex=r"Account No\s*:\s*([\d ]+)$"),
        )
        rows = [o.row for o in parser.parse(b"%PDF", "estado.pdf", config) if o.kept]
        assert rows[0].account_no == "123456789012"

    def test_cuenta_obligatoria(self, parser):
        config = BankParsingConfig(
            page_table=PageTableConfig(line_pattern=LINE),
            account=AccountConfig(required=True),
        )
        with pytest.raises(AccountNumberRequiredError):
            parser.parse(b"%PDF", "estado.pdf", config)

    def test_sin_configuracion_de_tabla(self, parser):
        with pytest.raises(ConfigurationError, match="pdfTable"):
            parser.parse(b"%PDF", "estado.pdf", BankParsingConfig())

    def test_fecha_ilegible_se_descarta(self):
        parser = PageStatementParser(FakeExtractor(["99/99/2024 ORDER9/UTR9 10.00 10.00"]))
        outcomes = parser.parse(b"%PDF", "estado.pdf", _config())
        assert outcomes[0].skip_reason is SkipReason.EXTRACTION_FAILED
