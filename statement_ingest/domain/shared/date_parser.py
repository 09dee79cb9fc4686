"""
Conversión unificada de fechas y horas de estados de cuenta.

CONTEXTO DEL PROBLEMA:
Cada banco escribe la fecha a su manera y la configuración de cada banco
usa la notación de patrones de Java ("dd/MM/yyyy", "dd-MMM-yyyy HH:mm"):

- CSV:            "21/11/2025" y "14:30:00" en columnas separadas
- Excel moderno:  celda tipada (datetime) o número de serie (45982.5)
- Excel antiguo:  número de serie que xlrd convierte a datetime
- PDF:            "21-Nov-2025" dentro de una línea de texto

SOLUCIÓN:
1. `java_pattern_to_strptime` traduce la notación de la configuración a
   la de `datetime.strptime`.
2. `DateTimeResolver` aplica la configuración de un banco a los valores
   crudos de fecha y hora de una fila.
3. `parse_statement_datetime` es la utilidad estricta: prueba una lista
   fija de patrones y lanza UnparseableDateError si ninguno coincide.

Nunca se convierte zona horaria: la fecha y hora quedan tal cual están
escritas en el documento. Sin hora, se usa medianoche.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from functools import lru_cache

from openpyxl.utils.datetime import from_excel

from statement_ingest.domain.exceptions import UnparseableDateError
from statement_ingest.domain.models.bank_config import DateInput, DateParseConfig
from statement_ingest.domain.shared.text_cleaner import clean_cell

# Patrones de la utilidad estricta. Primero los que traen hora.
DATETIME_PATTERNS: tuple[str, ...] = (
    "dd-MMM-yyyy HH:mm:ss",  # 21-Nov-2025 14:30:00
    "dd/MM/yyyy HH:mm:ss",  # 21/11/2025 14:30:00
    "dd MMM yyyy HH:mm:ss",  # 21 Nov 2025 14:30:00
    "dd-MM-yyyy HH:mm:ss",  # 21-11-2025 14:30:00
    "yyyy-MM-dd HH:mm:ss",  # 2025-11-21 14:30:00
    "dd-MMM-yyyy HH:mm",  # 21-Nov-2025 14:30
    "dd/MM/yyyy HH:mm",  # 21/11/2025 14:30
    "dd-MMM-yyyy'T'HH:mm:ss",  # 21-Nov-2025T14:30:00
    "yyyy-MM-dd'T'HH:mm:ss",  # 2025-11-21T14:30:00 (ISO)
)

DATE_PATTERNS: tuple[str, ...] = (
    "dd-MMM-yyyy",  # 21-Nov-2025
    "dd/MM/yyyy",  # 21/11/2025
    "dd MMM yyyy",  # 21 Nov 2025
    "dd-MM-yyyy",  # 21-11-2025
    "yyyy-MM-dd",  # 2025-11-21 (ISO)
    "d-MMM-yyyy",  # 1-Nov-2025
    "d/MM/yyyy",  # 1/11/2025
    "d MMM yyyy",  # 1 Nov 2025
)

DISPLAY_DATETIME_PATTERN = "dd-MMM-yyyy HH:mm:ss"
DISPLAY_DATE_PATTERN = "dd-MMM-yyyy"

# Letra de patrón → directiva de strptime, según la longitud de la corrida.
_SINGLE_LETTER_DIRECTIVES: dict[str, str] = {
    "d": "%d",
    "H": "%H",
    "h": "%I",
    "m": "%M",
    "s": "%S",
    "a": "%p",
    "S": "%f",
    "y": "%Y",
    "u": "%Y",
}

_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?$")


@lru_cache(maxsize=128)
def java_pattern_to_strptime(pattern: str) -> str:
    """Traduce un patrón estilo Java a formato de strptime.

    Soporta: d, dd, M, MM, MMM, MMMM, yy, yyyy, H, HH, h, hh, m, mm,
    s, ss, S..., a, E/EEE, EEEE y literales entre comillas ('T').

    Args:
        pattern: Patrón de la configuración. Ejemplo: "dd-MMM-yyyy HH:mm".

    Returns:
        Formato de strptime. Ejemplo: "%d-%b-%Y %H:%M".

    Raises:
        ValueError: Si el patrón tiene una letra no soportada o una comilla
                    sin cerrar.

    Ejemplos:
        >>> java_pattern_to_strptime("dd/MM/yyyy")
        '%d/%m/%Y'
        >>> java_pattern_to_strptime("yyyy-MM-dd'T'HH:mm:ss")
        '%Y-%m-%dT%H:%M:%S'
    """
    result: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]

        if char == "'":
            # '' es una comilla literal; 'texto' es texto literal
            end = pattern.find("'", i + 1)
            if end == -1:
                raise ValueError(f"Comilla sin cerrar en el patrón de fecha: '{pattern}'")
            literal = pattern[i + 1 : end] if end > i + 1 else "'"
            result.append(literal.replace("%", "%%"))
            i = end + 1
            continue

        if not char.isalpha():
            result.append("%%" if char == "%" else char)
            i += 1
            continue

        run = 1
        while i + run < len(pattern) and pattern[i + run] == char:
            run += 1
        result.append(_directive_for(char, run, pattern))
        i += run

    return "".join(result)


def _directive_for(letter: str, run: int, pattern: str) -> str:
    if letter == "M":
        if run >= 4:
            return "%B"
        if run == 3:
            return "%b"
        return "%m"
    if letter == "E":
        return "%A" if run >= 4 else "%a"
    if letter in ("y", "u") and run == 2:
        return "%y"
    directive = _SINGLE_LETTER_DIRECTIVES.get(letter)
    if directive is None:
        raise ValueError(f"Letra '{letter}' no soportada en el patrón de fecha: '{pattern}'")
    return directive


def parse_with_pattern(text: str, pattern: str) -> datetime:
    """Parsea un texto con un patrón estilo Java.

    Raises:
        UnparseableDateError: Si el texto no coincide con el patrón.
    """
    strptime_format = java_pattern_to_strptime(pattern)
    try:
        return datetime.strptime(text.strip(), strptime_format)
    except ValueError as e:
        raise UnparseableDateError(text, f"Patrón esperado '{pattern}': {e}")


class DateTimeResolver:
    """Aplica la configuración de fecha de un banco a los valores de una fila.

    Orden de resolución de la fecha:
    1. Celda tipada (datetime/date): se usa tal cual.
    2. Modo excelSerial: número de serie de Excel (o texto numérico),
       convertido con la época de Windows de openpyxl. Si falla, se sigue
       con el paso 3.
    3. Patrón de texto de la configuración (`format`). Con
       `with_time_in_same_field`, primero se intenta `format + " " +
       time_format`.
    Fecha vacía → la fecha de hoy (configuraciones que no mapean fecha).

    La hora se resuelve igual: celda tipada, fracción de día en modo
    excelSerial o patrón `time_format`. Hora vacía → medianoche.

    Ejemplos:
        >>> resolver = DateTimeResolver(DateParseConfig(format="dd/MM/yyyy"))
        >>> resolver.resolve("05/01/2024", "10:30:00")
        datetime.datetime(2024, 1, 5, 10, 30)
    """

    def __init__(
        self,
        config: DateParseConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._config = config or DateParseConfig()
        self._today = today

    @property
    def config(self) -> DateParseConfig:
        return self._config

    def resolve(self, date_value, time_value=None) -> datetime:
        """Combina fecha y hora crudas en un datetime sin zona horaria.

        Args:
            date_value: Texto, número de serie, date o datetime.
            time_value: Texto, fracción de día, time o datetime. Opcional.

        Returns:
            datetime naive con la fecha y hora del documento.

        Raises:
            UnparseableDateError: Si la fecha o la hora no coinciden con
                                  el patrón configurado.
        """
        resolved = self._resolve_date(date_value)
        parsed_time = self._resolve_time(time_value)
        if parsed_time is not None:
            resolved = datetime.combine(resolved.date(), parsed_time)
        return resolved.replace(tzinfo=None)

    def _resolve_date(self, value) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)

        if self._config.input is DateInput.EXCEL_SERIAL:
            serial = _excel_serial(value)
            if serial is not None:
                return serial

        text = _as_text(value)
        if not text:
            return datetime.combine(self._today(), time.min)

        if self._config.with_time_in_same_field:
            combined = f"{self._config.format} {self._config.time_format}"
            try:
                return parse_with_pattern(text, combined)
            except UnparseableDateError:
                pass

        try:
            return parse_with_pattern(text, self._config.format)
        except UnparseableDateError:
            # Las celdas tipadas convertidas a texto quedan en ISO
            if _ISO_DATETIME.match(text):
                return datetime.fromisoformat(text)
            raise

    def _resolve_time(self, value) -> time | None:
        if isinstance(value, datetime):
            return value.time()
        if isinstance(value, time):
            return value

        if self._config.input is DateInput.EXCEL_SERIAL and _is_number(value):
            converted = from_excel(float(value))
            if isinstance(converted, time):
                return converted
            if isinstance(converted, datetime):
                return converted.time()

        text = _as_text(value)
        if not text:
            return None
        return parse_with_pattern(text, self._config.time_format).time()


# ============================================================
# UTILIDAD ESTRICTA
# ============================================================


def parse_statement_datetime(text: str | None) -> datetime:
    """Parsea una fecha (con o sin hora) probando los patrones conocidos.

    Primero prueba DATETIME_PATTERNS; si ninguno coincide, DATE_PATTERNS
    con hora medianoche.

    Raises:
        UnparseableDateError: Si el texto está vacío o no coincide con
                              ningún patrón.

    Ejemplos:
        >>> parse_statement_datetime("21-Nov-2025 14:30:00")
        datetime.datetime(2025, 11, 21, 14, 30)
        >>> parse_statement_datetime("1 Nov 2025")
        datetime.datetime(2025, 11, 1, 0, 0)
    """
    if text is None or not text.strip():
        raise UnparseableDateError("", "El texto de fecha está vacío")

    trimmed = text.strip()
    for pattern in DATETIME_PATTERNS + DATE_PATTERNS:
        try:
            return datetime.strptime(trimmed, java_pattern_to_strptime(pattern))
        except ValueError:
            continue

    raise UnparseableDateError(
        trimmed,
        "Formatos soportados: dd-MMM-yyyy, dd/MM/yyyy, dd MMM yyyy, yyyy-MM-dd y variantes con hora",
    )


def parse_statement_date(text: str | None) -> date:
    """Igual que parse_statement_datetime pero devuelve solo la fecha."""
    return parse_statement_datetime(text).date()


def format_statement_datetime(value: datetime | None) -> str | None:
    """Formatea como "21-Nov-2025 14:30:00" (None → None)."""
    if value is None:
        return None
    return value.strftime(java_pattern_to_strptime(DISPLAY_DATETIME_PATTERN))


def format_statement_date(value: datetime | date | None) -> str | None:
    """Formatea como "21-Nov-2025" (None → None)."""
    if value is None:
        return None
    return value.strftime(java_pattern_to_strptime(DISPLAY_DATE_PATTERN))


def has_time_component(value: datetime | None) -> bool:
    """True si la hora no es medianoche."""
    if value is None:
        return False
    return value.time() != time.min


# ============================================================
# FUNCIONES INTERNAS (prefijo _ = no exportadas)
# ============================================================


def _is_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _excel_serial(value) -> datetime | None:
    """Número de serie de Excel → datetime, o None si no es un serial válido."""
    if _is_number(value):
        serial = float(value)
    else:
        text = _as_text(value)
        try:
            serial = float(text)
        except ValueError:
            return None
    try:
        converted = from_excel(serial)
    except (OverflowError, ValueError):
        return None
    return converted if isinstance(converted, datetime) else None


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return clean_cell(str(value))
