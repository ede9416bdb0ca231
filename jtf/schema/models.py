"""Data models for validation policy."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, model_validator

VERSION_RE = re.compile(r"v[0-9]+(\.[0-9]+)+")


class ValidationPolicy(BaseModel):
    """Format-version policy and optional checks loaded from YAML.

    Rules:
    - every supported version matches ``v<major>(.<minor>)+``
    - current_version is one of supported_versions
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    supported_versions: list[str] = Field(min_length=1)
    current_version: str
    check_formulas: bool = False
    registered_functions_only: bool = False

    @model_validator(mode="after")
    def _check_versions(self) -> ValidationPolicy:
        for version in self.supported_versions:
            if not VERSION_RE.fullmatch(version):
                raise ValueError(
                    f'Supported version "{version}" not in valid format. Expected format "v0.0.0".'
                )
        if self.current_version not in self.supported_versions:
            raise ValueError(
                f'current_version "{self.current_version}" must be listed in supported_versions.'
            )
        return self
