"""Exception types raised by the report engine."""


class ReportError(Exception):
    """Base class for report generation errors."""


class PdfGenerationError(ReportError):
    """Rendering failed; the message is prefixed with ``Erro ao gerar PDF: ``."""

    PREFIX = "Erro ao gerar PDF: "

    def __init__(self, message: str):
        super().__init__(f"{self.PREFIX}{message}")
