from __future__ import annotations

from pathlib import Path

import pytest

from jtf.schema.policy_loader import default_policy, load_policy


def test_load_default_policy() -> None:
    policy = load_policy()

    assert policy.current_version == "v1.1.9"
    assert "v1.1.9" in policy.supported_versions
    assert policy.check_formulas is False
    assert default_policy() == policy


def test_load_policy_from_file(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text(
        """
supported_versions: [" v2.0 ", v2.1]
current_version: v2.1
check_formulas: true
""",
        encoding="utf-8",
    )

    policy = load_policy(path)

    assert policy.supported_versions == ["v2.0", "v2.1"]
    assert policy.check_formulas is True
    assert policy.registered_functions_only is False


def test_load_policy_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Policy file not found"):
        load_policy(tmp_path / "missing.yaml")


def test_load_policy_raises_for_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text("supported_versions: [v1.1.9\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_policy(path)


def test_load_policy_raises_for_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text("- v1.1.9\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_policy(path)


@pytest.mark.parametrize(
    "body",
    [
        "supported_versions: [v1.1.9]\ncurrent_version: v1.2.0\n",
        "supported_versions: [1.1.9]\ncurrent_version: 1.1.9\n",
        "supported_versions: []\ncurrent_version: v1.1.9\n",
        "supported_versions: [v1.1.9]\ncurrent_version: v1.1.9\nstrict: true\n",
        "current_version: v1.1.9\n",
    ],
)
def test_load_policy_raises_for_invalid_schema(tmp_path: Path, body: str) -> None:
    path = tmp_path / "policy.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid policy schema"):
        load_policy(path)
