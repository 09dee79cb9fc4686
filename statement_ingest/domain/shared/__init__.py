"""
Utilidades compartidas del dominio.

Funciones sin estado que usan todos los parsers de formato. Solo operan
sobre tipos nativos de Python y sobre los modelos de configuración.

Uso:
    from statement_ingest.domain.shared.money import parse_amount, is_amount
    from statement_ingest.domain.shared.date_parser import DateTimeResolver
    from statement_ingest.domain.shared.reference import decompose_reference
    from statement_ingest.domain.shared.pay_in import is_pay_in
    from statement_ingest.domain.shared.text_cleaner import normalize_header
"""
