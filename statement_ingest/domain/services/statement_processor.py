"""
Servicio de dominio: Procesador de estados de cuenta.

Punto de entrada del motor:
1. Recibe los bytes (o un stream binario) de un archivo subido.
2. Detecta el formato por extensión y content-type.
3. Toma la configuración del banco para ese formato.
4. Obtiene el parser del formato (Registry).
5. Parsea, registra los descartes y devuelve las filas conservadas.

¿Por qué no poner esta lógica en el orquestador que recibe el archivo?
Porque "dado un archivo y la configuración de su banco, producir filas"
es una regla del dominio. El orquestador solo decide QUÉ hacer con las
filas (deduplicar, guardar, contar).
"""

from collections.abc import Callable
from datetime import date
from typing import BinaryIO

from statement_ingest.domain.exceptions import ParserBaseError
from statement_ingest.domain.models.bank_config import BankConfig
from statement_ingest.domain.models.parsed_row import ParsedRow
from statement_ingest.domain.models.row_outcome import RowOutcome
from statement_ingest.domain.ports.process_logger import ProcessLogger
from statement_ingest.domain.services.format_detector import detect_kind
from statement_ingest.infrastructure.registry import StatementParserRegistry, create_default_registry


class StatementProcessor:
    """Procesa un archivo de estado de cuenta y produce filas canónicas.

    Recibe sus dependencias por constructor (Dependency Injection).
    No sabe qué parsers concretos se están usando, solo conoce el registro
    y el puerto de bitácora.
    """

    def __init__(self, parser_registry: StatementParserRegistry, logger: ProcessLogger) -> None:
        """
        Args:
            parser_registry: Registro con un parser por formato.
            logger: Logger para la bitácora de procesamiento.
        """
        self._registry = parser_registry
        self._logger = logger

    def parse(
        self,
        stream: bytes | BinaryIO,
        filename: str,
        content_type: str | None,
        bank_config: BankConfig,
        account_no_override: str | None = None,
    ) -> list[ParsedRow]:
        """Parsea el archivo y devuelve solo las filas conservadas, en orden.

        Raises:
            UnsupportedFormatError: Formato desconocido, o el banco no tiene
                                    configuración para ese formato.
            HeaderNotFoundError, ExtractionError, RowExtractionError,
            AccountNumberRequiredError: Errores fatales del parser.
        """
        outcomes = self.parse_outcomes(stream, filename, content_type, bank_config, account_no_override)
        return [outcome.row for outcome in outcomes if outcome.row is not None]

    def parse_outcomes(
        self,
        stream: bytes | BinaryIO,
        filename: str,
        content_type: str | None,
        bank_config: BankConfig,
        account_no_override: str | None = None,
    ) -> list[RowOutcome]:
        """Igual que parse, pero devuelve también las filas descartadas."""
        try:
            kind = detect_kind(filename, content_type)
            self._logger.log_file_received(filename, kind.value)

            config = bank_config.for_kind(kind)
            parser = self._registry.get(kind)
            outcomes = parser.parse(
                read_content(stream),
                filename,
                config,
                parser_key=bank_config.parser_key,
                account_no_override=account_no_override,
            )
        except ParserBaseError as e:
            self._logger.log_error(filename, e)
            raise

        skipped = 0
        for outcome in outcomes:
            if outcome.skip_reason is not None:
                skipped += 1
                self._logger.log_row_skipped(
                    filename, outcome.source_row, outcome.skip_reason.value, outcome.detail
                )
        self._logger.log_parse_complete(filename, len(outcomes) - skipped, skipped)
        return outcomes


def read_content(stream: bytes | BinaryIO) -> bytes:
    """Lee el archivo completo una sola vez.

    Raises:
        TypeError: Si el stream devuelve texto en lugar de bytes.
    """
    if isinstance(stream, (bytes, bytearray, memoryview)):
        return bytes(stream)
    content = stream.read()
    if not isinstance(content, bytes):
        raise TypeError(f"Se esperaba un stream binario, se recibió {type(content).__name__}")
    return content


def parse_statement(
    stream: bytes | BinaryIO,
    filename: str,
    content_type: str | None,
    bank_config: BankConfig,
    account_no_override: str | None = None,
    logger: ProcessLogger | None = None,
    today: Callable[[], date] = date.today,
) -> list[ParsedRow]:
    """Atajo con el registro por defecto y StdlibLogger.

    Ejemplo:
        >>> with open("estado.csv", "rb") as f:
        ...     rows = parse_statement(f, "estado.csv", "text/csv", configs["kgb"])
    """
    from statement_ingest.adapters.output.loggers.stdlib_logger import StdlibLogger

    logger = logger or StdlibLogger()
    processor = StatementProcessor(create_default_registry(logger=logger, today=today), logger)
    return processor.parse(stream, filename, content_type, bank_config, account_no_override)
