"""
Puerto de entrada: Parser de estados de cuenta por formato.

Define el contrato de cada "armador de filas". Hay exactamente un
StatementParser por cada FileKind:

    StatementParser (interfaz)
    ├── DelimitedStatementParser    → CSV
    ├── SpreadsheetStatementParser  → .xlsx / .xls (uno por lector)
    └── PageStatementParser         → PDF

¿Por qué devuelve list[RowOutcome] y no list[ParsedRow]?
Porque una fila descartada (monto cero, fecha ilegible, línea que no
coincide) es un resultado normal, no una excepción. El StatementProcessor
registra los descartes y entrega solo las filas conservadas.
"""

from abc import ABC, abstractmethod

from statement_ingest.domain.models.bank_config import BankParsingConfig
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.row_outcome import RowOutcome


class StatementParser(ABC):
    """Interfaz para convertir un archivo de un formato en filas canónicas."""

    @property
    @abstractmethod
    def kind(self) -> FileKind:
        """Formato que este parser maneja.

        Se usa como clave en el registro de parsers (Registry).
        """
        ...

    @abstractmethod
    def parse(
        self,
        content: bytes,
        file_name: str,
        config: BankParsingConfig,
        parser_key: str = "",
        account_no_override: str | None = None,
    ) -> list[RowOutcome]:
        """Parsea el archivo completo y devuelve una salida por fila de datos.

        Args:
            content: Bytes del archivo completo.
            file_name: Nombre original. Para trazabilidad.
            config: Configuración del banco para este formato.
            parser_key: Clave del banco (elige el perfil de detección de cuenta).
            account_no_override: Número de cuenta dado por el llamador. Si
                                 está presente, no se busca en el archivo.

        Returns:
            RowOutcome por cada fila de datos, en orden de aparición.

        Raises:
            HeaderNotFoundError: Si no se encuentra un encabezado suficiente.
            ExtractionError: Si la librería no puede abrir el archivo.
            RowExtractionError: Si falla una fila de hoja de cálculo.
            AccountNumberRequiredError: Si la cuenta es obligatoria y no hay.
        """
        ...
