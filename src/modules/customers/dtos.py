"""Customer DTOs for the Service Layer.

Customers are the ``user``-role accounts of ``modules.accounts``; these
DTOs only carry the admin's query and status change.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CustomerQueryDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    search: str = Field(default="", max_length=100)


class CustomerStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_active: bool = Field(strict=True)
