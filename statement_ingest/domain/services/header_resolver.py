"""
Servicio de dominio: Resolución del encabezado de movimientos.

Ubica la columna de cada campo lógico (fecha, referencia, crédito...) y la
primera fila de datos. Trabaja sobre filas de texto, así que sirve igual
para CSV (filas del lector csv) y para hojas de cálculo (SheetGrid.text_rows).

Dos modos:
- fixed:  columnas y primera fila de datos vienen en la configuración.
- search: se buscan los sinónimos configurados dentro de una ventana de N
          filas que se fusionan por columna ("Transaction" + "Date" →
          "Transaction Date"). La ventana es fija o se desliza por un rango.

En modo search el armado de filas también usa `is_header_band` para saltar
encabezados repetidos (muchos bancos repiten el encabezado en cada página).
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from statement_ingest.domain.exceptions import HeaderNotFoundError
from statement_ingest.domain.models.bank_config import HeaderConfig, HeaderMode, SearchHeaders
from statement_ingest.domain.models.header_mapping import HeaderContext, HeaderMapping
from statement_ingest.domain.shared.text_cleaner import clean_cell, normalize_header

TextRows = Sequence[Sequence[str]]


@dataclass(frozen=True)
class HeaderResolution:
    """Resultado de ubicar el encabezado."""

    mapping: HeaderMapping
    first_data_row: int
    """Primera fila de datos (base cero)."""

    context: HeaderContext | None = None
    """Encabezado por columna; solo en modo search."""

    band_size: int = 0
    """Filas de un encabezado repetido. 0 = no se buscan repeticiones."""


def merge_header_rows(rows: TextRows, first: int, last: int, separator: str = " ") -> list[str]:
    """Fusiona por columna el texto de las filas first..last (inclusivo).

    Las celdas vacías se omiten; las demás se unen con el separador.
    Las filas fuera del rango del archivo cuentan como vacías.

    Ejemplos:
        >>> merge_header_rows([["Transaction", "Ref"], ["Date", ""]], 0, 1)
        ['Transaction Date', 'Ref']
    """
    available = range(max(first, 0), min(last, len(rows) - 1) + 1)
    width = max((len(rows[r]) for r in available), default=0)

    merged: list[str] = []
    for col in range(width):
        pieces = []
        for r in available:
            value = clean_cell(rows[r][col]) if col < len(rows[r]) else ""
            if value:
                pieces.append(value)
        merged.append(separator.join(pieces))
    return merged


def fill_forward(headers: list[str]) -> list[str]:
    """Copia el último encabezado no vacío sobre las columnas vacías siguientes.

    Un título combinado sobre las columnas U..X solo tiene texto en U; con
    esto V, W y X también quedan con ese título.
    """
    filled: list[str] = []
    last = ""
    for header in headers:
        if header and header.strip():
            last = header
            filled.append(header)
        else:
            filled.append(last)
    return filled


def map_header(merged: Sequence[str], expect: Mapping[str, Sequence[str]]) -> HeaderMapping:
    """Asigna a cada campo la primera columna cuyo encabezado es un sinónimo.

    La comparación es por igualdad después de normalizar (NBSP, espacios,
    mayúsculas). Una misma columna puede quedar asignada a varios campos.
    """
    normalized_expect = {
        field_name: {normalize_header(s) for s in synonyms if s} for field_name, synonyms in expect.items()
    }
    columns: dict[str, int] = {}
    for col, header in enumerate(merged):
        normalized = normalize_header(header)
        if not normalized:
            continue
        for field_name, synonyms in normalized_expect.items():
            if field_name not in columns and normalized in synonyms:
                columns[field_name] = col
    return HeaderMapping(columns)


class HeaderResolver:
    """Ubica el encabezado según la configuración de un banco.

    Args:
        config: Configuración de encabezados del banco.
        fill_forward_merged: True en hojas de cálculo, para repartir un
                             título combinado entre las columnas que cubre.
    """

    def __init__(self, config: HeaderConfig | None, fill_forward_merged: bool = False):
        self._config = config
        self._fill_forward = fill_forward_merged

    def resolve(self, rows: TextRows, file_name: str = "") -> HeaderResolution:
        """Devuelve el mapeo de columnas y la primera fila de datos.

        Raises:
            HeaderNotFoundError: Si no hay configuración de encabezados, si la
                                 ventana fija no es suficiente o si ninguna
                                 ventana del rango lo es.
        """
        if self._config is None:
            raise HeaderNotFoundError(file_name, "El banco no tiene configuración de encabezados")

        if self._config.mode is HeaderMode.FIXED:
            fixed = self._config.fixed
            return HeaderResolution(
                mapping=HeaderMapping(fixed.columns.as_mapping()),
                first_data_row=fixed.row_start,
            )

        search = self._config.search
        size = search.multi_row_count

        if search.fixed_header_rows is not None:
            window = search.to_zero_based(search.fixed_header_rows)
            merged = self._merge(rows, window.start, window.end, search)
            mapping = map_header(merged, search.expect)
            if not mapping.is_sufficient:
                raise HeaderNotFoundError(
                    file_name,
                    f"Las filas {window.start}..{window.end} no tienen fecha, referencia y monto "
                    f"(encontrado: {dict(mapping.columns)})",
                )
            return self._resolution(mapping, window.end, merged, search)

        scan = search.to_zero_based(search.scan_range)
        for start in range(scan.start, scan.end - (size - 1) + 1):
            last = start + size - 1
            merged = self._merge(rows, start, last, search)
            mapping = map_header(merged, search.expect)
            if mapping.is_sufficient:
                return self._resolution(mapping, last, merged, search)

        raise HeaderNotFoundError(
            file_name,
            f"Ninguna ventana de {size} fila(s) entre {scan.start} y {scan.end} es suficiente",
        )

    def is_header_band(self, rows: TextRows, start: int) -> bool:
        """Indica si las filas start..start+N-1 forman un encabezado repetido.

        Solo aplica en modo search. Una ventana que se sale del archivo no
        es un encabezado.
        """
        if self._config is None or self._config.mode is not HeaderMode.SEARCH:
            return False
        search = self._config.search
        last = start + search.multi_row_count - 1
        if start < 0 or last >= len(rows):
            return False
        merged = self._merge(rows, start, last, search)
        return map_header(merged, search.expect).is_sufficient

    def _merge(self, rows: TextRows, first: int, last: int, search: SearchHeaders) -> list[str]:
        merged = merge_header_rows(rows, first, last, search.merge_separator)
        return fill_forward(merged) if self._fill_forward else merged

    def _resolution(
        self,
        mapping: HeaderMapping,
        last_header_row: int,
        merged: list[str],
        search: SearchHeaders,
    ) -> HeaderResolution:
        return HeaderResolution(
            mapping=mapping,
            first_data_row=last_header_row + search.row_start_offset,
            context=HeaderContext(header_by_col=tuple(merged), expect=search.expect),
            band_size=search.multi_row_count,
        )
