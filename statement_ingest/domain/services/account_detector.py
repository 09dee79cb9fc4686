"""
Servicio de dominio: Detección del número de cuenta.

Solo se usa cuando el llamador no da el número. Cada banco pone la cuenta
en un lugar distinto del encabezado de la hoja, así que la búsqueda es una
heurística guiada por un AccountDetectionProfile:

1. Etiqueta y barrido a la derecha: una celda que contiene un sinónimo de
   "número de cuenta" y, a su derecha, una celda con suficientes dígitos.
2. Columnas probables del banco, con la misma regla.
3. Barrido general: cualquier celda con el patrón de dígitos, salvo que ella
   o una vecina inmediata hablen de IFSC, CIF, PAN, etc.

Gana la primera coincidencia. Si nada coincide, la cuenta queda ausente.

Los perfiles NO son estado global: el registro se construye una vez
(infrastructure/registry.py) y se pasa al detector.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass

from statement_ingest.domain.exceptions import AccountNumberRequiredError
from statement_ingest.domain.models.account_profile import AccountDetectionProfile
from statement_ingest.domain.models.sheet_grid import SheetGrid, cell_to_text
from statement_ingest.domain.shared.text_cleaner import normalize_header

DEFAULT_PROFILE_KEY = "_default"


@dataclass(frozen=True)
class AccountDetection:
    """Número de cuenta encontrado y la regla que lo encontró."""

    account_no: str
    source: str
    """'cell', 'label', 'likely-column', 'scan' o 'text'."""


def profile_for(
    profiles: Mapping[str, AccountDetectionProfile],
    parser_key: str | None,
) -> AccountDetectionProfile:
    """Perfil del banco, o el perfil por defecto. Nunca falla.

    Raises:
        KeyError: Solo si el registro no tiene perfil por defecto, lo cual
                  es un error de construcción del registro.
    """
    if parser_key:
        profile = profiles.get(parser_key.lower())
        if profile is not None:
            return profile
    return profiles[DEFAULT_PROFILE_KEY]


def cleanup_account(raw: str | None, cleanup_regex: str = r"\D") -> str | None:
    """Limpia un número de cuenta (por defecto, deja solo dígitos).

    Ejemplos:
        >>> cleanup_account("A/C 1234-5678-9012")
        '123456789012'
        >>> cleanup_account("   ") is None
        True
    """
    if raw is None:
        return None
    cleaned = re.sub(cleanup_regex, "", raw).strip()
    return cleaned or None


def find_account_in_text(text: str, account_regex: str, cleanup_regex: str = r"\D") -> str | None:
    """Busca la cuenta en texto libre (documentos por página).

    Si el regex tiene un grupo, se usa el primer grupo; si no, la
    coincidencia completa.
    """
    match = re.search(account_regex, text, re.MULTILINE)
    if not match:
        return None
    raw = match.group(1) if match.groups() else match.group(0)
    return cleanup_account(raw, cleanup_regex)


class AccountNumberDetector:
    """Busca el número de cuenta en las primeras filas de una hoja."""

    def __init__(self, profiles: Mapping[str, AccountDetectionProfile]):
        if DEFAULT_PROFILE_KEY not in profiles:
            raise ValueError(f"El registro de perfiles debe incluir '{DEFAULT_PROFILE_KEY}'")
        self._profiles = profiles

    def detect(self, grid: SheetGrid, parser_key: str | None = None) -> AccountDetection | None:
        """Aplica las tres pasadas y devuelve la primera coincidencia."""
        profile = profile_for(self._profiles, parser_key)
        max_row = min(grid.last_row, profile.rows_to_scan)
        if max_row < 0:
            return None

        found = self._by_label(grid, profile, max_row)
        if found is not None:
            return AccountDetection(found, "label")

        found = self._by_likely_columns(grid, profile, max_row)
        if found is not None:
            return AccountDetection(found, "likely-column")

        found = self._by_broad_scan(grid, profile, max_row)
        if found is not None:
            return AccountDetection(found, "scan")

        return None

    def _by_label(self, grid: SheetGrid, profile: AccountDetectionProfile, max_row: int) -> str | None:
        for row in range(max_row + 1):
            for col in range(grid.width(row)):
                label = normalize_header(grid.text(row, col))
                if not label or not any(syn in label for syn in profile.label_synonyms):
                    continue
                for probe in range(col + 1, col + profile.right_scan_columns + 1):
                    found = _plausible_account(_merged_text(grid, row, probe), profile)
                    if found is not None:
                        return found
        return None

    def _by_likely_columns(self, grid: SheetGrid, profile: AccountDetectionProfile, max_row: int) -> str | None:
        for row in range(max_row + 1):
            for col in profile.likely_cols:
                found = _plausible_account(_merged_text(grid, row, col), profile)
                if found is not None:
                    return found
        return None

    def _by_broad_scan(self, grid: SheetGrid, profile: AccountDetectionProfile, max_row: int) -> str | None:
        for row in range(max_row + 1):
            for col in range(grid.width(row)):
                text = _merged_text(grid, row, col)
                match = profile.value_pattern.search(text) if text else None
                if match is None:
                    continue
                left = _merged_text(grid, row, col - 1) if col > 0 else ""
                right = _merged_text(grid, row, col + 1)
                if any(profile.non_account_keys.search(t) for t in (text, left, right)):
                    continue
                return match.group(0)
        return None


def _merged_text(grid: SheetGrid, row: int, col: int) -> str:
    return cell_to_text(grid.value_or_merged(row, col))


def _plausible_account(text: str, profile: AccountDetectionProfile) -> str | None:
    """Dígitos de la celda si son suficientes, o la coincidencia del patrón."""
    if not text:
        return None
    digits = re.sub(r"\D", "", text)
    if len(digits) >= profile.min_digits:
        return digits
    match = profile.value_pattern.search(text)
    return match.group(0) if match else None


def require_account(
    account_no: str | None,
    required: bool,
    file_name: str,
    parser_key: str = "",
) -> str | None:
    """Devuelve la cuenta, o falla si es obligatoria y no se encontró.

    Raises:
        AccountNumberRequiredError: Si `required` y no hay número.
    """
    if account_no is None and required:
        raise AccountNumberRequiredError(file_name, parser_key)
    return account_no
