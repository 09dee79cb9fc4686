"""
Adaptador de salida: Logger a consola.

Implementación simple de ProcessLogger que imprime eventos a stdout, con
un formato consistente y un resumen final.

Útil para:
- Desarrollo y debugging de la configuración de un banco nuevo.
- Ejecución manual desde una terminal o un notebook.

Para producción se usa StdlibLogger, que implementa la misma interfaz
sobre el módulo `logging`.
"""

from statement_ingest.domain.ports.process_logger import ProcessLogger


class ConsoleLogger(ProcessLogger):
    """Logger que imprime eventos de procesamiento a consola.

    Args:
        verbose: Si True, también imprime cada fila descartada.
    """

    def __init__(self, verbose: bool = False) -> None:
        self._verbose = verbose
        self._archivos_recibidos: int = 0
        self._archivos_procesados: int = 0
        self._total_filas: int = 0
        self._filas_descartadas: int = 0
        self._errores: list[dict] = []

    def log_file_received(self, file_name: str, file_kind: str) -> None:
        self._archivos_recibidos += 1
        print(f"  📄 Recibido: {file_name} ({file_kind})")

    def log_header_resolved(self, file_name: str, columns: dict[str, int], first_data_row: int) -> None:
        mapeo = ", ".join(f"{campo}={col}" for campo, col in columns.items())
        print(f"  🧭 Encabezado: {file_name} — {mapeo} (datos desde la fila {first_data_row})")

    def log_account_detected(self, file_name: str, account_no: str | None, source: str) -> None:
        if account_no is None:
            print(f"  🏦 Cuenta no encontrada: {file_name}")
        else:
            print(f"  🏦 Cuenta {account_no} ({source}): {file_name}")

    def log_row_skipped(self, file_name: str, source_row: int, reason: str, detail: str = "") -> None:
        self._filas_descartadas += 1
        if self._verbose:
            print(f"  ⏭️  Fila {source_row} descartada ({reason}): {detail}")

    def log_parse_complete(self, file_name: str, num_rows: int, num_skipped: int) -> None:
        self._archivos_procesados += 1
        self._total_filas += num_rows
        print(f"  ✅ Completado: {file_name} — {num_rows} filas, {num_skipped} descartadas")

    def log_error(self, file_name: str, error: Exception) -> None:
        self._errores.append({"archivo": file_name, "error": str(error)})
        print(f"  ❌ Error: {file_name} — {error}")

    def get_summary(self) -> dict:
        return {
            "archivos_recibidos": self._archivos_recibidos,
            "archivos_procesados": self._archivos_procesados,
            "archivos_con_error": len(self._errores),
            "total_filas": self._total_filas,
            "filas_descartadas": self._filas_descartadas,
            "errores": self._errores,
        }

    def print_summary(self) -> None:
        """Imprime el resumen final del procesamiento."""
        print("\n" + "=" * 60)
        print("RESUMEN DE PROCESAMIENTO")
        print("=" * 60)
        print(f"  Archivos recibidos:   {self._archivos_recibidos}")
        print(f"  Archivos procesados:  {self._archivos_procesados}")
        print(f"  Archivos con error:   {len(self._errores)}")
        print(f"  Total filas:          {self._total_filas}")
        print(f"  Filas descartadas:    {self._filas_descartadas}")

        if self._errores:
            print("\n  ERRORES:")
            for err in self._errores:
                print(f"    - {err['archivo']}: {err['error']}")

        print("=" * 60)
