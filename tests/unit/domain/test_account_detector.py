"""
Tests para statement_ingest.domain.services.account_detector
"""

import pytest

from statement_ingest.domain.exceptions import AccountNumberRequiredError
from statement_ingest.domain.models.account_profile import AccountDetectionProfile
from statement_ingest.domain.models.sheet_grid import MergedRange, SheetGrid
from statement_ingest.domain.services.account_detector import (
    DEFAULT_PROFILE_KEY,
    AccountNumberDetector,
    cleanup_account,
    find_account_in_text,
    profile_for,
    require_account,
)
from statement_ingest.infrastructure.registry import create_default_account_profiles


@pytest.fixture
def detector():
    return AccountNumberDetector(create_default_account_profiles())


class TestProfileFor:
    def test_perfil_del_banco(self):
        profiles = create_default_account_profiles()
        assert profile_for(profiles, "KGB") is profiles["kgb"]

    def test_perfil_por_defecto(self):
        profiles = create_default_account_profiles()
        assert profile_for(profiles, "desconocido") is profiles[DEFAULT_PROFILE_KEY]
        assert profile_for(profiles, None) is profiles[DEFAULT_PROFILE_KEY]

    def test_registro_sin_defecto(self):
        with pytest.raises(ValueError, match="_default"):
            AccountNumberDetector({"kgb": AccountDetectionProfile(label_synonyms=("number",))})


class TestCleanup:
    def test_solo_digitos(self):
        assert cleanup_account("A/C 1234-5678-9012") == "123456789012"

    def test_vacio(self):
        assert cleanup_account("   ") is None
        assert cleanup_account(None) is None

    def test_regex_propio(self):
        assert cleanup_account("AC-00123", r"^AC-") == "00123"


class TestFindAccountInText:
    def test_primer_grupo(self):
        text = "Statement\nAccount No : 1234 5678 9012\nPeriod"
        assert find_account_in_text(text, r"Account No\s*:\s*([\d ]+)$") == "123456789012"

    def test_sin_grupo_usa_coincidencia(self):
        assert find_account_in_text("Cuenta 987654321012", r"\d{12}") == "987654321012"

    def test_sin_coincidencia(self):
        assert find_account_in_text("Sin cuenta", r"\d{12}") is None


class TestAccountNumberDetector:
    def test_etiqueta_en_la_misma_celda(self, detector):
        grid = SheetGrid.from_rows(
            [
                ["Bank Statement"],
                ["Customer", "ACME LTD"],
                ["A/C No: 123456789012"],
            ]
        )
        found = detector.detect(grid)
        assert found.account_no == "123456789012"

    def test_etiqueta_y_valor_a_la_derecha(self, detector):
        grid = SheetGrid.from_rows([["Account Number", None, None, "0012-3456-7890"]])
        found = detector.detect(grid)
        assert found.account_no == "001234567890"
        assert found.source == "label"

    def test_valor_numerico_de_excel(self, detector):
        grid = SheetGrid.from_rows([["A/C No", 123456789012.0]])
        assert detector.detect(grid).account_no == "123456789012"

    def test_valor_en_celda_combinada(self, detector):
        grid = SheetGrid.from_rows(
            [["", "", "123456789012"], ["Account No", None, None]],
            [MergedRange(first_row=0, last_row=1, first_col=2, last_col=3)],
        )
        found = detector.detect(grid)
        assert found.account_no == "123456789012"
        assert found.source == "label"

    def test_etiqueta_sin_valor(self, detector):
        grid = SheetGrid.from_rows([["Account No", None, ""]])
        assert detector.detect(grid) is None

    def test_columnas_probables(self):
        profile = AccountDetectionProfile(label_synonyms=("zzz",), likely_cols=(2,))
        detector = AccountNumberDetector({DEFAULT_PROFILE_KEY: profile})
        grid = SheetGrid.from_rows([["x", "y", "ACC-998877665544"]])
        found = detector.detect(grid)
        assert found.account_no == "998877665544"
        assert found.source == "likely-column"

    def test_barrido_general(self, detector):
        grid = SheetGrid.from_rows([["Holder", "ACME", "Ref 567890123456"]])
        found = detector.detect(grid)
        assert found.account_no == "567890123456"
        assert found.source == "scan"

    def test_rechaza_ifsc_vecino(self, detector):
        grid = SheetGrid.from_rows([["IFSC", "123456789012"]])
        assert detector.detect(grid) is None

    def test_rechaza_ifsc_en_la_misma_celda(self, detector):
        grid = SheetGrid.from_rows([["IFSC 123456789012", "Branch"]])
        assert detector.detect(grid) is None

    def test_ifsc_no_tapa_la_cuenta_real(self, detector):
        grid = SheetGrid.from_rows(
            [
                ["IFSC", "998877665544"],
                [],
                ["Holder 123456789012"],
            ]
        )
        assert detector.detect(grid).account_no == "123456789012"

    def test_pocos_digitos(self, detector):
        grid = SheetGrid.from_rows([["Account No", "12345"]])
        assert detector.detect(grid) is None

    def test_solo_las_primeras_filas(self):
        profile = AccountDetectionProfile(label_synonyms=("account no",), header_search_rows=0)
        detector = AccountNumberDetector({DEFAULT_PROFILE_KEY: profile})
        rows = [[] for _ in range(25)] + [["Account No", "123456789012"]]
        assert detector.detect(SheetGrid.from_rows(rows)) is None

    def test_hoja_vacia(self, detector):
        assert detector.detect(SheetGrid.from_rows([])) is None


class TestRequireAccount:
    def test_cuenta_presente(self):
        assert require_account("123", True, "a.xlsx") == "123"

    def test_cuenta_opcional(self):
        assert require_account(None, False, "a.xlsx") is None

    def test_cuenta_obligatoria(self):
        with pytest.raises(AccountNumberRequiredError, match="kgb"):
            require_account(None, True, "a.xlsx", "kgb")
