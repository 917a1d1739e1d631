import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from math import ceil
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

PHONE_PATTERN = r"^\+?[0-9]{10,15}$"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiModel(BaseModel):
    """Request body base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiOut(ApiModel):
    """Response base: reads ORM objects by attribute."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PaginationOut(ApiOut):
    page: int
    limit: int
    total_count: int
    total_pages: int


class MessageOut(ApiOut):
    message: str


class SuccessOut(ApiOut):
    success: bool = True


# Turkish messages keyed by pydantic error type.
ERROR_MESSAGES = {
    "missing": "Bu alan zorunludur",
    "string_type": "Metin olmalıdır",
    "string_too_short": "En az {min_length} karakter olmalıdır",
    "string_too_long": "En fazla {max_length} karakter olabilir",
    "string_pattern_mismatch": "Geçersiz format",
    "int_type": "Tam sayı olmalıdır",
    "int_parsing": "Tam sayı olmalıdır",
    "int_from_float": "Tam sayı olmalıdır",
    "greater_than_equal": "{ge} değerinden küçük olamaz",
    "greater_than": "{gt} değerinden büyük olmalıdır",
    "less_than_equal": "{le} değerinden büyük olamaz",
    "bool_type": "Doğru/yanlış değeri olmalıdır",
    "bool_parsing": "Doğru/yanlış değeri olmalıdır",
    "list_type": "Liste olmalıdır",
    "too_short": "En az {min_length} öğe olmalıdır",
    "too_long": "En fazla {max_length} öğe olabilir",
    "dict_type": "Nesne olmalıdır",
    "literal_error": "Geçersiz değer, beklenen: {expected}",
    "enum": "Geçersiz değer, beklenen: {expected}",
    "datetime_parsing": "Geçersiz tarih",
    "datetime_from_date_parsing": "Geçersiz tarih",
    "datetime_type": "Geçersiz tarih",
    "json_invalid": "Geçersiz JSON",
    "model_attributes_type": "Nesne olmalıdır",
}


def translate_error(err: Dict[str, Any]) -> str:
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    template = ERROR_MESSAGES.get(err.get("type", ""))
    if template is None:
        return err.get("msg", "Geçersiz değer")
    try:
        return template.format(**ctx)
    except (KeyError, IndexError):
        return err.get("msg", "Geçersiz değer")


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``[{field, message}]``."""
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({"field": ".".join(loc), "message": translate_error(err)})
    return formatted


@dataclass
class ValidationResult(Generic[ModelT]):
    success: bool
    data: Optional[ModelT] = None
    error: List[Dict[str, str]] = field(default_factory=list)


def validate_request(schema: Type[ModelT], data: Any) -> ValidationResult[ModelT]:
    """Validate ``data`` against ``schema`` without raising."""
    try:
        return ValidationResult(success=True, data=schema.model_validate(data))
    except ValidationError as exc:
        return ValidationResult(success=False, error=format_validation_errors(exc.errors()))
    except (TypeError, ValueError):
        return ValidationResult(success=False, error=[{"field": "unknown", "message": "Validation failed"}])


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination_meta(page: int, limit: int, total_count: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "totalCount": total_count,
        "totalPages": ceil(total_count / limit) if limit else 0,
    }


def normalize_email(value: Any) -> Optional[str]:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        _, email = validate_email(str(value))
    except ValueError:
        raise ValueError("Geçerli bir e-posta adresi giriniz")
    return email


def normalize_phone(value: Any) -> Optional[str]:
    value = blank_to_none(value)
    if value is None:
        return None
    if not re.match(PHONE_PATTERN, str(value)):
        raise ValueError("Geçerli bir telefon numarası giriniz")
    return value


def parse_iso_datetime(value: Any) -> datetime:
    """Accept ``YYYY-MM-DD`` or an ISO-8601 datetime; aware values become naive UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError("Geçersiz tarih formatı (YYYY-MM-DD)")
    else:
        raise ValueError("Geçersiz tarih formatı (YYYY-MM-DD)")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
