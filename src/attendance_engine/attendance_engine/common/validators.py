from __future__ import annotations

from typing import Optional

from ..core.constants import REASON_MAX_LENGTH
from ..core.enums import FailureKind
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str, *, kind: FailureKind) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} là bắt buộc", kind=kind)
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int, *, kind: FailureKind) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} không được vượt quá {max_len} ký tự", kind=kind)
    return value


def require_reason(value: Optional[str], field_name: str = "Lý do") -> str:
    reason = require_non_empty(value, field_name, kind=FailureKind.MISSING_REASON)
    require_max_length(value, field_name, REASON_MAX_LENGTH, kind=FailureKind.MISSING_REASON)
    return reason
