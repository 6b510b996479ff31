from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    Lưu ý: chỉ đọc đối với engine; việc tạo/sửa thuộc về module quản lý người dùng.
    """

    user_id: int
    full_name: str
    username: str
    role: Role
    department: Optional[str] = None
    position: Optional[str] = None
    is_active: bool = True
