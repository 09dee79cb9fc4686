"""
Excepciones de dominio del motor de ingesta de estados de cuenta.

Cada condición fatal tiene su propia clase para que el orquestador que
llama al motor pueda distinguir "formato no soportado" de "no encontré el
encabezado" y decidir qué error mostrar al usuario. El motor nunca
reintenta nada.

Jerarquía:
    ParserBaseError
    ├── UnsupportedFormatError      → Ni la extensión ni el content-type coinciden
    ├── HeaderNotFoundError         → Ninguna ventana de encabezado es suficiente
    ├── ExtractionError             → La librería no pudo abrir el archivo
    ├── RowExtractionError          → Falló una fila de hoja de cálculo
    ├── AccountNumberRequiredError  → Cuenta obligatoria y no se encontró
    ├── ConfigurationError          → Documento de configuración inválido
    └── UnparseableDateError        → Fecha que no coincide con ningún patrón
"""


class ParserBaseError(Exception):
    """Excepción base del proyecto. Todas las demás heredan de esta.

    Permite capturar cualquier error del motor con un solo
    `except ParserBaseError` en el orquestador.
    """


class UnsupportedFormatError(ParserBaseError):
    """Se lanza cuando el archivo no corresponde a ningún formato conocido.

    Esto puede pasar porque:
    - La extensión no es .csv, .xlsx, .xls ni .pdf y el content-type
      tampoco ayuda.
    - El banco no tiene configuración para ese formato.
    """

    def __init__(self, archivo: str, detalle: str = ""):
        self.archivo = archivo
        self.detalle = detalle
        mensaje = f"Formato de archivo no soportado: {archivo}"
        if detalle:
            mensaje += f" — {detalle}"
        super().__init__(mensaje)


class HeaderNotFoundError(ParserBaseError):
    """Se lanza cuando no se puede construir un mapeo de columnas suficiente.

    Un mapeo es suficiente si tiene fecha, referencia y al menos uno de
    monto/crédito/débito. Si la ventana fija de encabezado no lo logra, o
    ninguna ventana del rango de búsqueda lo logra, el parseo completo se
    aborta: nunca se devuelve una secuencia parcial de filas.
    """

    def __init__(self, archivo: str, detalle: str = ""):
        self.archivo = archivo
        self.detalle = detalle
        mensaje = f"No se encontró el encabezado de movimientos en: {archivo}"
        if detalle:
            mensaje += f" — {detalle}"
        super().__init__(mensaje)


class ExtractionError(ParserBaseError):
    """Se lanza cuando falla la lectura del archivo con su librería.

    Esto puede pasar porque:
    - El libro de Excel está corrupto o protegido.
    - pdfplumber no puede abrir el PDF.
    - El charset configurado no decodifica el CSV.
    """

    def __init__(self, archivo: str, causa: str):
        self.archivo = archivo
        self.causa = causa
        super().__init__(f"Error extrayendo contenido de '{archivo}': {causa}")


class RowExtractionError(ParserBaseError):
    """Se lanza cuando una fila de hoja de cálculo no se puede derivar.

    En CSV y PDF una fila fallida se descarta; en hojas de cálculo el error
    aborta el parseo e indica la fila (base cero) para depurar.
    """

    def __init__(self, archivo: str, fila: int, causa: str):
        self.archivo = archivo
        self.fila = fila
        self.causa = causa
        super().__init__(f"Error en la fila {fila} de '{archivo}': {causa}")


class AccountNumberRequiredError(ParserBaseError):
    """Se lanza cuando la configuración exige número de cuenta y no hay.

    Ni el override del llamador ni la detección encontraron un número.
    El motor no intenta resolverlo: se reporta al orquestador.
    """

    def __init__(self, archivo: str, parser_key: str = ""):
        self.archivo = archivo
        self.parser_key = parser_key
        mensaje = f"Número de cuenta obligatorio no encontrado en: {archivo}"
        if parser_key:
            mensaje += f" (banco '{parser_key}')"
        super().__init__(mensaje)


class ConfigurationError(ParserBaseError):
    """Se lanza cuando un documento de configuración de banco es inválido."""

    def __init__(self, clave: str, causa: str):
        self.clave = clave
        self.causa = causa
        super().__init__(f"Configuración inválida en '{clave}': {causa}")


class UnparseableDateError(ParserBaseError, ValueError):
    """Se lanza cuando un texto de fecha no coincide con ningún patrón.

    Hereda también de ValueError para que el armado de filas lo trate
    igual que cualquier otro valor inválido (la fila se descarta).
    """

    def __init__(self, texto: str, detalle: str = ""):
        self.texto = texto
        mensaje = f"No se pudo interpretar la fecha: '{texto}'"
        if detalle:
            mensaje += f". {detalle}"
        super().__init__(mensaje)
