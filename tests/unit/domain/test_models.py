"""
Tests para los modelos de dominio.

Verifican las validaciones de construcción y la inmutabilidad: la
configuración se comparte entre parseos y no puede cambiar.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from statement_ingest.domain.exceptions import UnsupportedFormatError
from statement_ingest.domain.models import (
    AccountConfig,
    AccountDetectionProfile,
    BankConfig,
    BankParsingConfig,
    CellLocation,
    ColumnIndices,
    CsvOptions,
    FileKind,
    FixedHeaders,
    HeaderConfig,
    HeaderMapping,
    HeaderMode,
    MergedRange,
    PageTableConfig,
    PageText,
    ParsedRow,
    PartsCount,
    PartsCountMode,
    ReferenceConfig,
    RowOutcome,
    RowRange,
    RowStop,
    RowStopMode,
    SearchHeaders,
    SheetGrid,
    SkipReason,
)
from statement_ingest.domain.models.page_text import join_pages
from statement_ingest.domain.models.sheet_grid import cell_to_text


def _row(**overrides) -> ParsedRow:
    values = dict(
        transaction_datetime=datetime(2024, 1, 1),
        amount=Decimal("500"),
        balance=Decimal("1500"),
        reference="ORDER1/UTR1",
        order_id="ORDER1",
        utr="UTR1",
        pay_in=True,
        account_no=None,
    )
    values.update(overrides)
    return ParsedRow(**values)


class TestParsedRow:
    def test_creacion(self):
        row = _row()
        assert row.amount == Decimal("500")

    def test_monto_cero_invalido(self):
        with pytest.raises(ValueError, match="positivo"):
            _row(amount=Decimal("0"))

    def test_monto_negativo_invalido(self):
        with pytest.raises(ValueError, match="positivo"):
            _row(amount=Decimal("-1"))

    def test_zona_horaria_invalida(self):
        with pytest.raises(ValueError, match="zona horaria"):
            _row(transaction_datetime=datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_inmutable(self):
        row = _row()
        with pytest.raises(FrozenInstanceError):
            row.amount = Decimal("1")


class TestRowOutcome:
    def test_conservada(self):
        outcome = RowOutcome.keep(3, _row())
        assert outcome.kept is True
        assert outcome.skip_reason is None

    def test_descartada(self):
        outcome = RowOutcome.skip(4, SkipReason.EMPTY_UTR, "ORDER1/")
        assert outcome.kept is False
        assert outcome.detail == "ORDER1/"

    def test_no_puede_tener_ambas(self):
        with pytest.raises(ValueError):
            RowOutcome(source_row=1, row=_row(), skip_reason=SkipReason.EMPTY_UTR)

    def test_no_puede_estar_vacia(self):
        with pytest.raises(ValueError):
            RowOutcome(source_row=1)


class TestHeaderMapping:
    def test_suficiente_con_credito(self):
        assert HeaderMapping({"date": 0, "reference": 1, "credit": 2}).is_sufficient

    def test_insuficiente_sin_monto(self):
        assert not HeaderMapping({"date": 0, "reference": 1, "balance": 2}).is_sufficient

    def test_insuficiente_sin_referencia(self):
        assert not HeaderMapping({"date": 0, "amount": 2}).is_sufficient

    def test_otros_campos(self):
        mapping = HeaderMapping({"date": 0, "credit": 2})
        assert mapping.other_fields("date") == {"credit": 2}

    def test_inmutable(self):
        columns = {"date": 0}
        mapping = HeaderMapping(columns)
        columns["amount"] = 3
        assert "amount" not in mapping
        with pytest.raises(TypeError):
            mapping.columns["amount"] = 3


class TestBankConfig:
    def test_configuracion_por_formato(self):
        csv = BankParsingConfig()
        bank = BankConfig(parser_key="kgb", csv=csv)
        assert bank.for_kind(FileKind.DELIMITED_TEXT) is csv

    def test_formato_sin_configuracion(self):
        bank = BankConfig(parser_key="kgb")
        with pytest.raises(UnsupportedFormatError, match="pdf"):
            bank.for_kind(FileKind.PAGE_DOCUMENT)

    def test_column_indices_solo_configurados(self):
        assert ColumnIndices(date=0, credit=3).as_mapping() == {"date": 0, "credit": 3}

    def test_fixed_negativo(self):
        with pytest.raises(ValueError):
            FixedHeaders(row_start=-1)

    def test_search_requiere_rango(self):
        with pytest.raises(ValueError, match="scan_range"):
            SearchHeaders(expect={"date": ("Date",)})

    def test_search_requiere_sinonimos(self):
        with pytest.raises(ValueError, match="expect"):
            SearchHeaders(expect={}, scan_range=RowRange(1, 5))

    def test_search_rangos_base_uno(self):
        search = SearchHeaders(expect={"date": ("Date",)}, scan_range=RowRange(1, 5))
        assert search.to_zero_based(search.scan_range) == RowRange(0, 4)

    def test_search_rangos_base_cero(self):
        search = SearchHeaders(expect={"date": ("Date",)}, scan_range=RowRange(1, 5), one_based_rows=False)
        assert search.to_zero_based(search.scan_range) == RowRange(1, 5)

    def test_search_sinonimos_inmutables(self):
        search = SearchHeaders(expect={"date": ["Date"]}, scan_range=RowRange(1, 5))
        assert search.expect["date"] == ("Date",)
        with pytest.raises(TypeError):
            search.expect["amount"] = ("Amount",)

    def test_modo_sin_seccion(self):
        with pytest.raises(ValueError, match="fixed"):
            HeaderConfig(mode=HeaderMode.FIXED)

    def test_rango_invertido(self):
        with pytest.raises(ValueError):
            RowRange(5, 1)

    def test_parts_count(self):
        assert PartsCount(PartsCountMode.EXACT, (2,)).accepts(2)
        assert not PartsCount(PartsCountMode.EXACT, (2,)).accepts(3)
        assert PartsCount(PartsCountMode.ONE_OF, (2, 3)).accepts(3)
        assert not PartsCount(PartsCountMode.EXACT, ()).accepts(0)

    def test_row_stop_until_requiere_regex(self):
        with pytest.raises(ValueError, match="untilRegex"):
            RowStop(mode=RowStopMode.UNTIL)

    def test_regex_invalido_se_rechaza_al_construir(self):
        with pytest.raises(ValueError, match="utrFallback.regex"):
            ReferenceConfig(utr_fallback_regex="(")
        with pytest.raises(ValueError, match="rowStop.untilRegex"):
            RowStop(mode=RowStopMode.UNTIL, until_regex="[Total")
        with pytest.raises(ValueError, match="account.textRegex"):
            AccountConfig(text_regex="A/C (\\d+")
        with pytest.raises(ValueError, match="pdfTable.stopBeforeRegex"):
            PageTableConfig(line_pattern=".*", stop_before_regex="*Closing")

    def test_line_pattern_con_grupos_originales(self):
        assert PageTableConfig(line_pattern=r"(?<date>\S+) (?<ref>\S+)").line_pattern.startswith("(?<date>")
        with pytest.raises(ValueError, match="pdfTable.linePattern"):
            PageTableConfig(line_pattern=r"(?<date>\d+")

    def test_delimitador_de_un_caracter(self):
        with pytest.raises(ValueError):
            CsvOptions(delimiter=";;")

    def test_celda_base_uno(self):
        assert CellLocation(row=3, col=2).zero_based == (2, 1)
        assert CellLocation(row=3, col=2, one_based=False).zero_based == (3, 2)


class TestAccountDetectionProfile:
    def test_minimo_de_filas(self):
        assert AccountDetectionProfile(label_synonyms=(), header_search_rows=5).rows_to_scan == 20
        assert AccountDetectionProfile(label_synonyms=(), header_search_rows=80).rows_to_scan == 80

    def test_sinonimos_en_minusculas(self):
        profile = AccountDetectionProfile(label_synonyms=("A/C No", " ", ""))
        assert profile.label_synonyms == ("a/c no",)

    def test_min_digits_invalido(self):
        with pytest.raises(ValueError):
            AccountDetectionProfile(label_synonyms=(), min_digits=0)


class TestSheetGrid:
    @pytest.fixture
    def grid(self):
        return SheetGrid.from_rows(
            [
                ["Statement", None, None],
                ["Date", "Narration", "Credit", None, ""],
                [],
            ],
            [MergedRange(first_row=0, last_row=0, first_col=0, last_col=2)],
        )

    def test_recorta_celdas_vacias_al_final(self, grid):
        assert grid.width(1) == 3

    def test_fuera_de_rango(self, grid):
        assert grid.value(10, 0) is None
        assert grid.value(0, -1) is None

    def test_valor_de_celda_combinada(self, grid):
        assert grid.value(0, 2) is None
        assert grid.value_or_merged(0, 2) == "Statement"

    def test_fila_vacia(self, grid):
        assert grid.is_blank_row(2)
        assert not grid.is_blank_row(1)

    def test_row_line(self, grid):
        assert grid.row_line(1) == "Date Narration Credit"

    def test_cell_to_text(self):
        assert cell_to_text(123456789012.0) == "123456789012"
        assert cell_to_text(1234.5) == "1234.5"
        assert cell_to_text(None) == ""
        assert cell_to_text(datetime(2024, 1, 5, 10, 30)) == "2024-01-05T10:30:00"


class TestPageText:
    def test_join_pages(self):
        pages = [PageText(1, "uno"), PageText(2, "dos")]
        assert join_pages(pages) == "uno\ndos"
