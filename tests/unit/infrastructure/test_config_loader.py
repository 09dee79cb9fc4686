"""
Tests para la carga de configuración de bancos desde YAML.
"""

import pytest

from statement_ingest.domain.exceptions import ConfigurationError
from statement_ingest.domain.models.bank_config import (
    DateInput,
    HeaderMode,
    PartsCountMode,
    PayInRuleType,
    RowRange,
    RowStopMode,
)
from statement_ingest.infrastructure.config_loader import load_bank_configs

DOCUMENT = r"""
banks:
  KGB:
    parserKey: KGB
    timezone: Asia/Kolkata
    xlsx:
      sheetIndex: 0
      neighborScan: 2
      headers:
        mode: search
        search:
          scanRange: {from: 1, to: 30}
          multiRowCount: 2
          expect:
            date: ["Transaction Date", "Txn Date"]
            reference: Narration
            credit: ["Credit"]
            balance: ["Balance"]
      numeric: {thousandsSeparator: ".", decimalSeparator: ","}
      dateParse:
        input: excelSerial
        format: dd-MMM-yyyy
      reference:
        splitter: "/"
        partsCount: {mode: oneOf, values: [2, 3]}
        orderId: {index: 0}
        utr: {index: "1", cleanDigitsOnly: true}
        utrFallback: {regex: '\d{12}'}
        skipIf: {emptyUtr: true}
      payInRule:
        type: narrationContains
        narrationContainsAny: [UPI, IMPS]
      rowStop: {mode: until, untilRegex: '^Total'}
      account:
        required: true
        excelCell: {row: 3, col: 2}
    csv:
      headers:
        mode: fixed
        fixed:
          rowStart: 1
          columns: {date: 0, reference: 1, amount: 2}
      csv: {delimiter: ";", charset: ISO-8859-1, skipRows: 2}
      account:
        csvCell: {row: 0, col: 1}
        useOneBasedIndex: false
    pdf:
      pdfTable:
        linePattern: '(?<date>\S+)\s+(?<ref>\S+)\s+(?<credit>[\d,.]+)'
        startAfterRegex: '^Date'
        accountRegex: 'A/C (\d+)'
  demo:
    csv:
      headers:
        mode: fixed
        fixed: {rowStart: 1, columns: {date: 0, reference: 1, credit: 2}}
"""


@pytest.fixture
def configs():
    return load_bank_configs(DOCUMENT)


class TestLoadBankConfigs:
    def test_claves_en_minusculas(self, configs):
        assert set(configs) == {"kgb", "demo"}
        assert configs["kgb"].parser_key == "kgb"

    def test_parser_key_por_defecto(self, configs):
        assert configs["demo"].parser_key == "demo"
        assert configs["demo"].xlsx is None

    def test_resultado_inmutable(self, configs):
        with pytest.raises(TypeError):
            configs["otro"] = configs["demo"]

    def test_encabezado_de_busqueda(self, configs):
        xlsx = configs["kgb"].xlsx
        assert xlsx.headers.mode is HeaderMode.SEARCH
        search = xlsx.headers.search
        assert search.scan_range == RowRange(1, 30)
        assert search.multi_row_count == 2
        assert search.expect["date"] == ("Transaction Date", "Txn Date")
        assert search.expect["reference"] == ("Narration",)
        assert xlsx.neighbor_scan == 2

    def test_valores(self, configs):
        xlsx = configs["kgb"].xlsx
        assert xlsx.numeric.thousands_separator == "."
        assert xlsx.numeric.decimal_separator == ","
        assert xlsx.date_parse.input is DateInput.EXCEL_SERIAL
        assert xlsx.date_parse.format == "dd-MMM-yyyy"
        assert xlsx.date_parse.time_format == "HH:mm:ss"

    def test_referencia(self, configs):
        reference = configs["kgb"].xlsx.reference
        assert reference.splitter == "/"
        assert reference.parts_count.mode is PartsCountMode.ONE_OF
        assert reference.parts_count.values == (2, 3)
        assert reference.order_id.index == 0
        assert reference.utr.index == 1
        assert reference.utr.digits_only is True
        assert reference.utr_fallback_regex == r"\d{12}"
        assert reference.skip_if_empty_utr is True

    def test_abono_corte_y_cuenta(self, configs):
        xlsx = configs["kgb"].xlsx
        assert xlsx.pay_in_rule.type is PayInRuleType.NARRATION_CONTAINS
        assert xlsx.pay_in_rule.narration_contains_any == ("UPI", "IMPS")
        assert xlsx.row_stop.mode is RowStopMode.UNTIL
        assert xlsx.account.required is True
        assert xlsx.account.cell.zero_based == (2, 1)

    def test_csv(self, configs):
        csv = configs["kgb"].csv
        assert csv.headers.mode is HeaderMode.FIXED
        assert csv.headers.fixed.row_start == 1
        assert csv.headers.fixed.columns.as_mapping() == {"date": 0, "reference": 1, "amount": 2}
        assert csv.csv.delimiter == ";"
        assert csv.csv.charset == "ISO-8859-1"
        assert csv.csv.skip_rows == 2
        assert csv.account.cell.zero_based == (0, 1)

    def test_pdf(self, configs):
        table = configs["kgb"].pdf.page_table
        assert table.line_pattern.startswith("(?<date>")
        assert table.start_after_regex == "^Date"
        assert table.account_regex == r"A/C (\d+)"

    def test_desde_archivo(self, tmp_path):
        path = tmp_path / "banks.yaml"
        path.write_text(DOCUMENT, encoding="utf-8")
        assert set(load_bank_configs(path)) == {"kgb", "demo"}
        assert set(load_bank_configs(str(path))) == {"kgb", "demo"}

    def test_archivo_inexistente(self, tmp_path):
        with pytest.raises(ConfigurationError, match="no existe"):
            load_bank_configs(tmp_path / "nada.yaml")


class TestLoadBankConfigsErrores:
    def test_yaml_invalido(self):
        with pytest.raises(ConfigurationError, match="YAML"):
            load_bank_configs("banks: [sin cerrar")

    def test_sin_seccion_banks(self):
        with pytest.raises(ConfigurationError, match="banks"):
            load_bank_configs("otros: {}")

    def test_seccion_que_no_es_mapa(self):
        with pytest.raises(ConfigurationError, match="banks.kgb.csv"):
            load_bank_configs("banks:\n  kgb:\n    csv: [1, 2]\n")

    def test_enum_invalido(self):
        document = "banks:\n  kgb:\n    csv:\n      headers: {mode: guess}\n"
        with pytest.raises(ConfigurationError, match="banks.kgb.csv.headers.mode"):
            load_bank_configs(document)

    def test_modo_sin_su_seccion(self):
        document = "banks:\n  kgb:\n    csv:\n      headers: {mode: search}\n"
        with pytest.raises(ConfigurationError, match="requiere headers.search"):
            load_bank_configs(document)

    def test_campo_desconocido(self):
        document = (
            "banks:\n  kgb:\n    csv:\n      headers:\n        mode: search\n"
            "        search:\n          scanRange: {from: 1, to: 5}\n"
            "          expect: {fecha: [Date]}\n"
        )
        with pytest.raises(ConfigurationError, match="Campos desconocidos"):
            load_bank_configs(document)

    def test_parser_key_repetido(self):
        document = "banks:\n  a: {parserKey: kgb}\n  b: {parserKey: KGB}\n"
        with pytest.raises(ConfigurationError, match="repetido"):
            load_bank_configs(document)

    def test_entero_invalido(self):
        document = "banks:\n  kgb:\n    csv: {sheetIndex: primera}\n"
        with pytest.raises(ConfigurationError, match="sheetIndex"):
            load_bank_configs(document)

    def test_until_sin_regex(self):
        document = "banks:\n  kgb:\n    xlsx: {rowStop: {mode: until}}\n"
        with pytest.raises(ConfigurationError, match="untilRegex"):
            load_bank_configs(document)

    def test_delimitador_largo(self):
        document = "banks:\n  kgb:\n    csv: {csv: {delimiter: ';;'}}\n"
        with pytest.raises(ConfigurationError, match="delimitador"):
            load_bank_configs(document)

    @pytest.mark.parametrize(
        "section, key",
        [
            ("reference: {utrFallback: {regex: '('}}", "utrFallback.regex"),
            ("rowStop: {mode: until, untilRegex: '[Total'}", "rowStop.untilRegex"),
            ("account: {textRegex: 'A/C (\\d+'}", "account.textRegex"),
            ("account: {cleanupRegex: '['}", "account.cleanupRegex"),
            ("pdfTable: {linePattern: '(?<date>\\S+'}", "pdfTable.linePattern"),
            ("pdfTable: {linePattern: '.*', accountRegex: '*'}", "pdfTable.accountRegex"),
        ],
    )
    def test_regex_invalido_al_cargar(self, section, key):
        document = f"banks:\n  kgb:\n    csv:\n      {section}\n"
        with pytest.raises(ConfigurationError, match=key) as error:
            load_bank_configs(document)
        assert error.value.clave.startswith("banks.kgb.csv.")
        assert "expresión regular inválida" in error.value.causa
