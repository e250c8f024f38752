"""Module-list file schema."""
from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator


class ModuleList(BaseModel):
    path: Path
    identifiers: List[StrictStr]

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("identifiers")
    @classmethod
    def _ids_not_empty(cls, v: List[str]) -> List[str]:  # noqa: D401
        for ident in v:
            if not ident.strip():
                raise ValueError("module identifier cannot be empty")
        return v
