"""
Puertos (interfaces) del dominio.

Los puertos definen QUÉ necesita el dominio, sin decir CÓMO se implementa.
Cada puerto tiene uno o más adaptadores que lo implementan.

Uso:
    from statement_ingest.domain.ports import StatementParser, TextExtractor
"""

from statement_ingest.domain.ports.process_logger import ProcessLogger
from statement_ingest.domain.ports.sheet_reader import SheetReader
from statement_ingest.domain.ports.statement_parser import StatementParser
from statement_ingest.domain.ports.text_extractor import TextExtractor

__all__ = [
    "ProcessLogger",
    "SheetReader",
    "StatementParser",
    "TextExtractor",
]
