# artmarket/utils/sanitize.py
from typing import Any


def escape_markup(value: Any) -> Any:
    """Escapuje < i > w stringach od klienta (odpowiednik xss-clean)."""
    if isinstance(value, str):
        return value.replace("<", "&lt;").replace(">", "&gt;")
    if isinstance(value, list):
        return [escape_markup(v) for v in value]
    if isinstance(value, dict):
        return {k: escape_markup(v) for k, v in value.items()}
    return value


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
