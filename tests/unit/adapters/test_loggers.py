"""
Tests para los adaptadores de bitácora (StdlibLogger y ConsoleLogger).
"""

import logging

from statement_ingest.adapters.output.loggers.console_logger import ConsoleLogger
from statement_ingest.adapters.output.loggers.stdlib_logger import StdlibLogger
from statement_ingest.domain.exceptions import HeaderNotFoundError

LOGGER_NAME = "statement_ingest.adapters.output.loggers.stdlib_logger"


def _run_file(process_logger):
    process_logger.log_file_received("estado.csv", "csv")
    process_logger.log_header_resolved("estado.csv", {"date": 0, "credit": 2}, 1)
    process_logger.log_account_detected("estado.csv", "123456789012", "cell")
    process_logger.log_row_skipped("estado.csv", 3, "non_positive_amount", "monto=-200.00")
    process_logger.log_row_skipped("estado.csv", 4, "extraction_failed", "fecha")
    process_logger.log_parse_complete("estado.csv", 5, 2)


class TestStdlibLogger:
    def test_niveles(self, caplog):
        caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
        _run_file(StdlibLogger())

        levels = {r.getMessage(): r.levelno for r in caplog.records}
        assert levels["Archivo recibido: estado.csv (csv)"] == logging.INFO
        assert levels["Fila 3 de estado.csv descartada (non_positive_amount): monto=-200.00"] == logging.DEBUG
        assert levels["Fila 4 de estado.csv descartada (extraction_failed): fecha"] == logging.WARNING
        assert levels["Parseo completo de estado.csv: 5 filas, 2 descartadas"] == logging.INFO

    def test_error_con_traceback(self, caplog):
        error = HeaderNotFoundError("estado.csv")
        StdlibLogger().log_error("estado.csv", error)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info[1] is error

    def test_logger_inyectado(self, caplog):
        custom = logging.getLogger("orquestador")
        caplog.set_level(logging.INFO, logger="orquestador")
        StdlibLogger(custom).log_file_received("estado.pdf", "pdf")
        assert caplog.records[-1].name == "orquestador"

    def test_resumen(self):
        process_logger = StdlibLogger()
        _run_file(process_logger)
        process_logger.log_error("otro.xlsx", ValueError("roto"))

        summary = process_logger.get_summary()
        assert summary["archivos_recibidos"] == 1
        assert summary["archivos_procesados"] == 1
        assert summary["archivos_con_error"] == 1
        assert summary["total_filas"] == 5
        assert summary["filas_descartadas"] == 2
        assert summary["errores"] == [{"archivo": "otro.xlsx", "error": "roto"}]


class TestConsoleLogger:
    def test_imprime_eventos(self, capsys):
        _run_file(ConsoleLogger())
        out = capsys.readouterr().out
        assert "Recibido: estado.csv (csv)" in out
        assert "Cuenta 123456789012 (cell)" in out
        assert "5 filas, 2 descartadas" in out
        assert "Fila 3" not in out

    def test_verbose_imprime_descartes(self, capsys):
        _run_file(ConsoleLogger(verbose=True))
        assert "Fila 3 descartada (non_positive_amount): monto=-200.00" in capsys.readouterr().out

    def test_resumen_impreso(self, capsys):
        process_logger = ConsoleLogger()
        process_logger.log_error("estado.pdf", ValueError("PDF protegido"))
        process_logger.print_summary()

        out = capsys.readouterr().out
        assert "RESUMEN DE PROCESAMIENTO" in out
        assert "estado.pdf: PDF protegido" in out
        assert process_logger.get_summary()["archivos_con_error"] == 1
