"""Policy loading utilities for schema validation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from jtf.schema.models import ValidationPolicy

DEFAULT_POLICY_PATH = Path(__file__).with_name("policy.yaml")


def load_policy(path: Path | None = None) -> ValidationPolicy:
    """Load and validate a validation policy from YAML."""

    policy_path = path or DEFAULT_POLICY_PATH

    try:
        raw = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Policy file not found: {policy_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in policy file: {policy_path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Policy file must contain a mapping: {policy_path}")

    try:
        return ValidationPolicy.model_validate(_normalize_versions(raw))
    except ValidationError as exc:
        raise ValueError(f"Invalid policy schema: {policy_path}") from exc


@lru_cache(maxsize=1)
def default_policy() -> ValidationPolicy:
    """Return the bundled policy; the model is frozen so sharing it is safe."""

    return load_policy()


def _normalize_versions(raw: dict[object, object]) -> dict[object, object]:
    # Surrounding whitespace is not part of a version string.
    normalized = dict(raw)
    versions = normalized.get("supported_versions")
    if isinstance(versions, list):
        normalized["supported_versions"] = [
            item.strip() if isinstance(item, str) else item for item in versions
        ]
    current = normalized.get("current_version")
    if isinstance(current, str):
        normalized["current_version"] = current.strip()
    return normalized
