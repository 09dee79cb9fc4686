"""
Modelos de dominio del motor de ingesta de estados de cuenta.

Todos los modelos son dataclasses inmutables (frozen=True) que representan
los datos del negocio sin dependencias externas.

Uso:
    from statement_ingest.domain.models import BankConfig, ParsedRow, RowOutcome
"""

from statement_ingest.domain.models.account_profile import AccountDetectionProfile
from statement_ingest.domain.models.bank_config import (
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
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.models.header_mapping import HeaderContext, HeaderMapping
from statement_ingest.domain.models.page_text import PageText
from statement_ingest.domain.models.parsed_row import ParsedRow
from statement_ingest.domain.models.row_outcome import RowOutcome, SkipReason
from statement_ingest.domain.models.sheet_grid import MergedRange, SheetGrid

__all__ = [
    "AccountConfig",
    "AccountDetectionProfile",
    "BankConfig",
    "BankParsingConfig",
    "CellLocation",
    "ColumnIndices",
    "CsvOptions",
    "DateInput",
    "DateParseConfig",
    "FileKind",
    "FixedHeaders",
    "HeaderConfig",
    "HeaderContext",
    "HeaderMapping",
    "HeaderMode",
    "MergedRange",
    "NumericConvention",
    "PageTableConfig",
    "PageText",
    "ParsedRow",
    "PartsCount",
    "PartsCountMode",
    "PayInRule",
    "PayInRuleType",
    "ReferenceConfig",
    "ReferenceField",
    "RowOutcome",
    "RowRange",
    "RowStop",
    "RowStopMode",
    "SearchHeaders",
    "SheetGrid",
    "SkipReason",
]
