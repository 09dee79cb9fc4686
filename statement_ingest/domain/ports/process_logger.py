"""
Puerto de salida: Bitácora de procesamiento (Process Logger).

Define el contrato para registrar eventos durante el parseo de un estado
de cuenta.

¿Por qué no usar simplemente el módulo `logging` de Python?
Porque `logging` es una herramienta de infraestructura (HOW), mientras que
este puerto define los EVENTOS de negocio (WHAT):
- "Se recibió un archivo" (no "INFO: archivo recibido")
- "Se descartó la fila 12 porque el monto es cero"

La implementación puede usar `logging` internamente (StdlibLogger), pero el
dominio solo conoce los eventos de negocio. Esto permite:
- En producción: enviar a los handlers de `logging` del orquestador.
- En desarrollo: imprimir a consola (ConsoleLogger).
- En tests: acumular en memoria y hacer asserts.
"""

from abc import ABC, abstractmethod


class ProcessLogger(ABC):
    """Interfaz para la bitácora de procesamiento."""

    @abstractmethod
    def log_file_received(self, file_name: str, file_kind: str) -> None:
        """Registra que se recibió un archivo para parsear.

        Args:
            file_name: Nombre original del archivo.
            file_kind: Formato detectado: 'csv', 'xlsx', 'xls', 'pdf'.
        """
        ...

    @abstractmethod
    def log_header_resolved(self, file_name: str, columns: dict[str, int], first_data_row: int) -> None:
        """Registra el mapeo de columnas encontrado.

        Args:
            file_name: Nombre del archivo.
            columns: Campo lógico → columna (base cero).
            first_data_row: Primera fila de datos (base cero).
        """
        ...

    @abstractmethod
    def log_account_detected(self, file_name: str, account_no: str | None, source: str) -> None:
        """Registra el número de cuenta usado para las filas.

        Args:
            file_name: Nombre del archivo.
            account_no: Número encontrado, o None si no se encontró.
            source: De dónde salió: 'override', 'cell', 'label', 'likely-column',
                    'scan', 'text' o 'none'.
        """
        ...

    @abstractmethod
    def log_row_skipped(self, file_name: str, source_row: int, reason: str, detail: str = "") -> None:
        """Registra una fila descartada.

        Los montos no positivos son descartes normales (débitos, totales);
        la implementación decide con qué nivel registrarlos.
        """
        ...

    @abstractmethod
    def log_parse_complete(self, file_name: str, num_rows: int, num_skipped: int) -> None:
        """Registra el fin exitoso del parseo."""
        ...

    @abstractmethod
    def log_error(self, file_name: str, error: Exception) -> None:
        """Registra un error fatal durante el parseo.

        Se espera que la implementación capture el traceback completo
        para facilitar debugging.
        """
        ...

    @abstractmethod
    def get_summary(self) -> dict:
        """Devuelve un resumen de todo el procesamiento.

        Returns:
            Diccionario con métricas:
            {
                'archivos_recibidos': int,
                'archivos_procesados': int,
                'archivos_con_error': int,
                'total_filas': int,
                'filas_descartadas': int,
                'errores': List[dict],  # [{archivo, error}]
            }
        """
        ...
