"""
Carga de la configuración de bancos desde YAML.

El documento conserva las claves camelCase de la configuración original,
así que los archivos de bancos existentes se pueden copiar sin cambios:

    banks:
      kgb:
        parserKey: kgb
        xlsx:
          headers:
            mode: search
            search:
              scanRange: {from: 1, to: 30}
              multiRowCount: 2
              expect:
                date: ["Transaction Date", "Txn Date"]
                reference: ["Narration"]
                credit: ["Credit"]
          reference:
            splitter: "/"
            orderId: {index: 0}
            utr: {index: 1, cleanDigitsOnly: true}
        pdf:
          pdfTable:
            linePattern: '(?<date>\\S+)\\s+(?<ref>\\S+)\\s+(?<credit>[\\d,.]+)'

Se carga una vez al arrancar. El resultado es inmutable (MappingProxyType
de dataclasses frozen) y se puede compartir entre parseos concurrentes.
Cualquier error del documento se reporta como ConfigurationError con la
ruta de la clave ("banks.kgb.xlsx.headers.mode"). Las expresiones
regulares se compilan al cargar, no a mitad de un parseo.
"""

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from statement_ingest.domain.exceptions import ConfigurationError
from statement_ingest.domain.models.bank_config import (
    DEFAULT_NEIGHBOR_SCAN,
    LOGICAL_FIELDS,
    AccountConfig,
    BankConfig,
    BankParsingConfig,
    CellLocation,
    ColumnIndices,
    CsvOptions,
    DateInput,
    DateParseConfig,
    FixedHeaders,
    HeaderConfig,
    HeaderMode,
    NumericConvention,
    PageTableConfig,
    PartsCount,
    PartsCountMode,
    PayInRule,
    PayInRuleType,
    ReferenceConfig,
    ReferenceField,
    RowRange,
    RowStop,
    RowStopMode,
    SearchHeaders,
)


def load_bank_configs(source: str | Path) -> Mapping[str, BankConfig]:
    """Carga todos los bancos de un documento YAML.

    Args:
        source: Ruta a un archivo .yaml/.yml, o el texto YAML directamente.

    Returns:
        Mapping inmutable parserKey → BankConfig.

    Raises:
        ConfigurationError: Si el archivo no existe, el YAML es inválido o
                            alguna sección no tiene la forma esperada.
    """
    if isinstance(source, Path) or (isinstance(source, str) and source.endswith((".yaml", ".yml"))):
        path = Path(source)
        if not path.exists():
            raise ConfigurationError(str(path), "El archivo de configuración no existe")
        text = path.read_text(encoding="utf-8")
    else:
        text = source

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError("<documento>", f"YAML inválido: {e}") from e

    root = _mapping(data, "<documento>")
    banks = _mapping(root.get("banks"), "banks")

    configs: dict[str, BankConfig] = {}
    for bank_name, bank_data in banks.items():
        bank = parse_bank_config(bank_data, f"banks.{bank_name}", default_key=str(bank_name))
        if bank.parser_key in configs:
            raise ConfigurationError(f"banks.{bank_name}.parserKey", f"parserKey repetido: '{bank.parser_key}'")
        configs[bank.parser_key] = bank
    return MappingProxyType(configs)


def parse_bank_config(data: Any, path: str, default_key: str = "") -> BankConfig:
    """Convierte la sección de un banco en BankConfig."""
    section = _mapping(data, path)
    parser_key = _str(section.get("parserKey"), f"{path}.parserKey") or default_key
    if not parser_key:
        raise ConfigurationError(f"{path}.parserKey", "Es obligatorio")

    return BankConfig(
        parser_key=parser_key.lower(),
        csv=_optional_format(section, "csv", path),
        xlsx=_optional_format(section, "xlsx", path),
        xls=_optional_format(section, "xls", path),
        pdf=_optional_format(section, "pdf", path),
    )


def _optional_format(section: Mapping[str, Any], key: str, path: str) -> BankParsingConfig | None:
    if section.get(key) is None:
        return None
    return parse_format_config(section[key], f"{path}.{key}")


def parse_format_config(data: Any, path: str) -> BankParsingConfig:
    """Convierte la sección de un formato (csv, xlsx, xls, pdf)."""
    section = _mapping(data, path)
    try:
        return BankParsingConfig(
            headers=_headers(section.get("headers"), f"{path}.headers"),
            numeric=_numeric(section.get("numeric"), f"{path}.numeric"),
            date_parse=_date_parse(section.get("dateParse"), f"{path}.dateParse"),
            reference=_reference(section.get("reference"), f"{path}.reference"),
            pay_in_rule=_pay_in_rule(section.get("payInRule"), f"{path}.payInRule"),
            row_stop=_row_stop(section.get("rowStop"), f"{path}.rowStop"),
            account=_account(section.get("account"), f"{path}.account"),
            csv=_csv(section.get("csv"), f"{path}.csv"),
            sheet_index=_int(section.get("sheetIndex"), f"{path}.sheetIndex", default=0),
            neighbor_scan=_int(section.get("neighborScan"), f"{path}.neighborScan", default=DEFAULT_NEIGHBOR_SCAN),
            page_table=_page_table(section.get("pdfTable"), f"{path}.pdfTable"),
        )
    except ConfigurationError:
        raise
    except ValueError as e:
        raise ConfigurationError(path, str(e)) from e


# ============================================================
# SECCIONES
# ============================================================


def _headers(data: Any, path: str) -> HeaderConfig | None:
    if data is None:
        return None
    section = _mapping(data, path)
    mode = _enum(HeaderMode, section.get("mode"), f"{path}.mode")

    fixed = None
    if section.get("fixed") is not None:
        fixed_data = _mapping(section["fixed"], f"{path}.fixed")
        columns_data = _mapping(fixed_data.get("columns") or {}, f"{path}.fixed.columns")
        _reject_unknown(columns_data, LOGICAL_FIELDS, f"{path}.fixed.columns")
        fixed = FixedHeaders(
            row_start=_int(fixed_data.get("rowStart"), f"{path}.fixed.rowStart", default=0),
            columns=ColumnIndices(
                **{name: _int(columns_data.get(name), f"{path}.fixed.columns.{name}") for name in columns_data}
            ),
        )

    search = None
    if section.get("search") is not None:
        search = _search(section["search"], f"{path}.search")

    return _build(HeaderConfig, path, mode=mode, fixed=fixed, search=search)


def _search(data: Any, path: str) -> SearchHeaders:
    section = _mapping(data, path)
    expect_data = _mapping(section.get("expect"), f"{path}.expect")
    _reject_unknown(expect_data, LOGICAL_FIELDS, f"{path}.expect")
    expect = {name: _str_list(values, f"{path}.expect.{name}") for name, values in expect_data.items()}

    return _build(
        SearchHeaders,
        path,
        expect=expect,
        scan_range=_range(section.get("scanRange"), f"{path}.scanRange"),
        fixed_header_rows=_range(section.get("fixedHeaderRows"), f"{path}.fixedHeaderRows"),
        row_start_offset=_int(section.get("rowStartOffset"), f"{path}.rowStartOffset", default=1),
        multi_row_count=_int(section.get("multiRowCount"), f"{path}.multiRowCount", default=1),
        one_based_rows=_bool(section.get("useOneBasedRowIndex"), f"{path}.useOneBasedRowIndex", default=True),
        merge_separator=_str(section.get("mergeSeparator"), f"{path}.mergeSeparator") or " ",
    )


def _range(data: Any, path: str) -> RowRange | None:
    if data is None:
        return None
    section = _mapping(data, path)
    start = _int(section.get("from"), f"{path}.from")
    end = _int(section.get("to"), f"{path}.to")
    if start is None or end is None:
        raise ConfigurationError(path, "Se requieren 'from' y 'to'")
    return _build(RowRange, path, start=start, end=end)


def _numeric(data: Any, path: str) -> NumericConvention:
    if data is None:
        return NumericConvention()
    section = _mapping(data, path)
    return NumericConvention(
        thousands_separator=_str(section.get("thousandsSeparator"), f"{path}.thousandsSeparator", default=","),
        decimal_separator=_str(section.get("decimalSeparator"), f"{path}.decimalSeparator", default="."),
    )


def _date_parse(data: Any, path: str) -> DateParseConfig:
    if data is None:
        return DateParseConfig()
    section = _mapping(data, path)
    defaults = DateParseConfig()
    return DateParseConfig(
        input=_enum(DateInput, section.get("input"), f"{path}.input", default=defaults.input),
        format=_str(section.get("format"), f"{path}.format", default=defaults.format),
        time_format=_str(section.get("timeFormat"), f"{path}.timeFormat", default=defaults.time_format),
        with_time_in_same_field=_bool(section.get("withTimeInSameField"), f"{path}.withTimeInSameField"),
    )


def _reference(data: Any, path: str) -> ReferenceConfig:
    if data is None:
        return ReferenceConfig()
    section = _mapping(data, path)

    parts_count = None
    if section.get("partsCount") is not None:
        parts_data = _mapping(section["partsCount"], f"{path}.partsCount")
        parts_count = PartsCount(
            mode=_enum(PartsCountMode, parts_data.get("mode"), f"{path}.partsCount.mode"),
            values=tuple(_int_list(parts_data.get("values"), f"{path}.partsCount.values")),
        )

    fallback = _mapping(section.get("utrFallback") or {}, f"{path}.utrFallback")
    skip_if = _mapping(section.get("skipIf") or {}, f"{path}.skipIf")

    return _build(
        ReferenceConfig,
        path,
        splitter=_str(section.get("splitter"), f"{path}.splitter"),
        parts_count=parts_count,
        order_id=_reference_field(section.get("orderId"), f"{path}.orderId"),
        utr=_reference_field(section.get("utr"), f"{path}.utr"),
        utr_fallback_regex=_str(fallback.get("regex"), f"{path}.utrFallback.regex"),
        skip_if_empty_utr=_bool(skip_if.get("emptyUtr"), f"{path}.skipIf.emptyUtr"),
    )


def _reference_field(data: Any, path: str) -> ReferenceField | None:
    if data is None:
        return None
    section = _mapping(data, path)
    index = _int(section.get("index"), f"{path}.index")
    if index is None:
        raise ConfigurationError(f"{path}.index", "Es obligatorio")
    return ReferenceField(
        index=index,
        digits_only=_bool(section.get("cleanDigitsOnly"), f"{path}.cleanDigitsOnly"),
    )


def _pay_in_rule(data: Any, path: str) -> PayInRule:
    if data is None:
        return PayInRule()
    section = _mapping(data, path)
    return PayInRule(
        type=_enum(PayInRuleType, section.get("type"), f"{path}.type", default=None),
        narration_contains_any=tuple(
            _str_list(section.get("narrationContainsAny") or [], f"{path}.narrationContainsAny")
        ),
    )


def _row_stop(data: Any, path: str) -> RowStop:
    if data is None:
        return RowStop()
    section = _mapping(data, path)
    return _build(
        RowStop,
        path,
        mode=_enum(RowStopMode, section.get("mode"), f"{path}.mode", default=RowStopMode.NONE),
        until_regex=_str(section.get("untilRegex"), f"{path}.untilRegex"),
    )


def _account(data: Any, path: str) -> AccountConfig:
    if data is None:
        return AccountConfig()
    section = _mapping(data, path)
    one_based = _bool(section.get("useOneBasedIndex"), f"{path}.useOneBasedIndex", default=True)

    cell = None
    for key in ("excelCell", "csvCell"):
        if section.get(key) is not None:
            cell_data = _mapping(section[key], f"{path}.{key}")
            row = _int(cell_data.get("row"), f"{path}.{key}.row")
            col = _int(cell_data.get("col"), f"{path}.{key}.col")
            if row is None or col is None:
                raise ConfigurationError(f"{path}.{key}", "Se requieren 'row' y 'col'")
            cell = CellLocation(row=row, col=col, one_based=one_based)
            break

    return _build(
        AccountConfig,
        path,
        required=_bool(section.get("required"), f"{path}.required"),
        cell=cell,
        text_regex=_str(section.get("textRegex"), f"{path}.textRegex"),
        cleanup_regex=_str(section.get("cleanupRegex"), f"{path}.cleanupRegex", default=r"\D"),
    )


def _csv(data: Any, path: str) -> CsvOptions:
    if data is None:
        return CsvOptions()
    section = _mapping(data, path)
    return _build(
        CsvOptions,
        path,
        delimiter=_str(section.get("delimiter"), f"{path}.delimiter", default=","),
        charset=_str(section.get("charset"), f"{path}.charset", default="UTF-8"),
        skip_rows=_int(section.get("skipRows"), f"{path}.skipRows", default=0),
    )


def _page_table(data: Any, path: str) -> PageTableConfig | None:
    if data is None:
        return None
    section = _mapping(data, path)
    line_pattern = _str(section.get("linePattern"), f"{path}.linePattern")
    if not line_pattern:
        raise ConfigurationError(f"{path}.linePattern", "Es obligatorio")
    return _build(
        PageTableConfig,
        path,
        line_pattern=line_pattern,
        start_after_regex=_str(section.get("startAfterRegex"), f"{path}.startAfterRegex"),
        stop_before_regex=_str(section.get("stopBeforeRegex"), f"{path}.stopBeforeRegex"),
        account_regex=_str(section.get("accountRegex"), f"{path}.accountRegex"),
    )


# ============================================================
# VALORES
# ============================================================


def _mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(path, f"Se esperaba una sección, se recibió {type(value).__name__}")
    return value


def _str(value: Any, path: str, default: str | None = None) -> str | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigurationError(path, f"Se esperaba texto, se recibió {type(value).__name__}")
    return str(value)


def _int(value: Any, path: str, default: int | None = None) -> int | None:
    """Entero; acepta texto numérico ("0") como la configuración original."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigurationError(path, "Se esperaba un entero, se recibió bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ConfigurationError(path, f"Se esperaba un entero, se recibió {value!r}")


def _bool(value: Any, path: str, default: bool = False) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(path, f"Se esperaba true/false, se recibió {value!r}")
    return value


def _str_list(value: Any, path: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigurationError(path, "Se esperaba una lista de textos")
    return [_str(item, f"{path}[{i}]") for i, item in enumerate(value) if item is not None]


def _int_list(value: Any, path: str) -> list[int]:
    if not isinstance(value, list) or not value:
        raise ConfigurationError(path, "Se esperaba una lista de enteros no vacía")
    return [_int(item, f"{path}[{i}]") for i, item in enumerate(value)]


def _enum(enum_type, value: Any, path: str, default=...):
    """Miembro del enum por su valor (sin distinguir mayúsculas)."""
    if value is None:
        if default is ...:
            raise ConfigurationError(path, "Es obligatorio")
        return default
    text = str(value).strip().lower()
    for member in enum_type:
        if member.value.lower() == text:
            return member
    allowed = ", ".join(member.value for member in enum_type)
    raise ConfigurationError(path, f"Valor '{value}' inválido. Valores permitidos: {allowed}")


def _reject_unknown(section: Mapping[str, Any], allowed: tuple[str, ...], path: str) -> None:
    unknown = [key for key in section if key not in allowed]
    if unknown:
        raise ConfigurationError(path, f"Campos desconocidos: {unknown}. Permitidos: {list(allowed)}")


def _build(cls, path: str, **kwargs):
    try:
        return cls(**kwargs)
    except ValueError as e:
        raise ConfigurationError(path, str(e)) from e
