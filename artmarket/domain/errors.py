# artmarket/domain/errors.py


class MissingFieldsError(ValueError):
    """Brak wymaganych pol w zadaniu."""

    def __init__(self, fields: list[str] | None = None, message: str = "Please add all the fields"):
        super().__init__(message)
        self.fields = fields or []


class NotFoundError(LookupError):
    pass


class ConflictError(ValueError):
    pass


class UpstreamError(RuntimeError):
    """Blad zewnetrznego serwisu (image host, bramka platnosci, relay maili)."""
