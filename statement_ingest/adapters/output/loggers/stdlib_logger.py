"""
Adaptador de salida: Logger sobre el módulo `logging` de Python.

Es el logger por defecto del motor. El orquestador que llama al motor
configura handlers y niveles como en el resto de su aplicación; aquí
solo se emiten los eventos con el nivel adecuado:

- INFO:    archivo recibido, encabezado, cuenta, parseo completo
- DEBUG:   filas descartadas por monto no positivo (débitos, totales)
- WARNING: filas descartadas por un valor ilegible
- ERROR:   errores fatales (con traceback)
"""

import logging

from statement_ingest.domain.models.row_outcome import SkipReason
from statement_ingest.domain.ports.process_logger import ProcessLogger

logger = logging.getLogger(__name__)

_QUIET_REASONS = frozenset({SkipReason.NON_POSITIVE_AMOUNT.value, SkipReason.NO_LINE_MATCH.value})


class StdlibLogger(ProcessLogger):
    """ProcessLogger que delega en un `logging.Logger`."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger
        self._archivos_recibidos: int = 0
        self._archivos_procesados: int = 0
        self._total_filas: int = 0
        self._filas_descartadas: int = 0
        self._errores: list[dict] = []

    def log_file_received(self, file_name: str, file_kind: str) -> None:
        self._archivos_recibidos += 1
        self._log.info("Archivo recibido: %s (%s)", file_name, file_kind)

    def log_header_resolved(self, file_name: str, columns: dict[str, int], first_data_row: int) -> None:
        self._log.info("Encabezado de %s: %s, datos desde la fila %d", file_name, columns, first_data_row)

    def log_account_detected(self, file_name: str, account_no: str | None, source: str) -> None:
        if account_no is None:
            self._log.info("No se encontró número de cuenta en %s", file_name)
        else:
            self._log.info("Cuenta de %s: %s (%s)", file_name, account_no, source)

    def log_row_skipped(self, file_name: str, source_row: int, reason: str, detail: str = "") -> None:
        self._filas_descartadas += 1
        level = logging.DEBUG if reason in _QUIET_REASONS else logging.WARNING
        self._log.log(level, "Fila %d de %s descartada (%s): %s", source_row, file_name, reason, detail)

    def log_parse_complete(self, file_name: str, num_rows: int, num_skipped: int) -> None:
        self._archivos_procesados += 1
        self._total_filas += num_rows
        self._log.info("Parseo completo de %s: %d filas, %d descartadas", file_name, num_rows, num_skipped)

    def log_error(self, file_name: str, error: Exception) -> None:
        self._errores.append({"archivo": file_name, "error": str(error)})
        self._log.error("Error procesando %s: %s", file_name, error, exc_info=error)

    def get_summary(self) -> dict:
        return {
            "archivos_recibidos": self._archivos_recibidos,
            "archivos_procesados": self._archivos_procesados,
            "archivos_con_error": len(self._errores),
            "total_filas": self._total_filas,
            "filas_descartadas": self._filas_descartadas,
            "errores": self._errores,
        }
