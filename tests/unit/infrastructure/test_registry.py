"""
Tests para el registro de parsers y los perfiles de detección de cuenta.
"""

import pytest

from statement_ingest.adapters.input.statement_parsers.delimited_parser import DelimitedStatementParser
from statement_ingest.adapters.input.statement_parsers.page_parser import PageStatementParser
from statement_ingest.adapters.input.statement_parsers.spreadsheet_parser import SpreadsheetStatementParser
from statement_ingest.domain.models.file_kind import FileKind
from statement_ingest.domain.services.account_detector import DEFAULT_PROFILE_KEY
from statement_ingest.infrastructure.registry import (
    StatementParserRegistry,
    create_default_account_profiles,
    create_default_registry,
)


class TestStatementParserRegistry:
    def test_registro_vacio(self):
        registry = StatementParserRegistry()
        assert len(registry) == 0
        assert registry.available_kinds == []
        assert registry.missing_kinds == list(FileKind)

    def test_registra_y_obtiene(self):
        registry = StatementParserRegistry()
        parser = DelimitedStatementParser()
        registry.register(parser)
        assert registry.get(FileKind.DELIMITED_TEXT) is parser
        assert registry.available_kinds == [FileKind.DELIMITED_TEXT]

    def test_formato_repetido(self):
        registry = StatementParserRegistry()
        registry.register(DelimitedStatementParser())
        with pytest.raises(ValueError, match="Ya existe un parser registrado para 'csv'"):
            registry.register(DelimitedStatementParser())

    def test_formato_sin_parser(self):
        with pytest.raises(KeyError, match="pdf"):
            StatementParserRegistry().get(FileKind.PAGE_DOCUMENT)


class TestCreateDefaultRegistry:
    def test_un_parser_por_formato(self):
        registry = create_default_registry()
        assert len(registry) == len(FileKind)
        assert registry.missing_kinds == []

    def test_tipos_de_parser(self):
        registry = create_default_registry()
        assert isinstance(registry.get(FileKind.DELIMITED_TEXT), DelimitedStatementParser)
        assert isinstance(registry.get(FileKind.SPREADSHEET_MODERN), SpreadsheetStatementParser)
        assert isinstance(registry.get(FileKind.SPREADSHEET_LEGACY), SpreadsheetStatementParser)
        assert isinstance(registry.get(FileKind.PAGE_DOCUMENT), PageStatementParser)

    def test_perfiles_sin_defecto(self):
        with pytest.raises(ValueError, match=DEFAULT_PROFILE_KEY):
            create_default_registry(profiles={})


class TestDefaultAccountProfiles:
    def test_incluye_defecto_y_kgb(self):
        profiles = create_default_account_profiles()
        assert set(profiles) == {DEFAULT_PROFILE_KEY, "kgb"}

    def test_perfil_kgb(self):
        kgb = create_default_account_profiles()["kgb"]
        assert kgb.likely_cols == (11, 12, 13)
        assert "number" in kgb.label_synonyms

    def test_inmutable(self):
        with pytest.raises(TypeError):
            create_default_account_profiles()["otro"] = None
