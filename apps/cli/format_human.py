"""Human-readable document summary rendering for CLI output."""

from __future__ import annotations

from collections import Counter

from jtf.document.document import Document


def render_document_summary(document: Document) -> str:
    """Render a one-screen summary of a document."""

    metadata = document.metadata
    lines: list[str] = []
    lines.append("document_summary:")
    lines.append(f"jtf={metadata.get('jtf')} title={_to_string(metadata.get('title'))}")
    lines.append(f"author={_to_string(metadata.get('author'))}")
    lines.append(f"created_at={document.created_at} updated_at={document.updated_at}")

    extra = metadata.get("extra") or []
    if extra:
        processors = ", ".join(sorted(entry["processor"] for entry in extra))
        lines.append(f"extra: {processors}")
    else:
        lines.append("extra: none")

    lines.append(f"document_rules: {_rule_summary(document.style)}")

    tables = document.tables
    lines.append(f"tables: {len(tables)}")
    for table in tables:
        array = table.to_array()
        width = len(array[0]) if array else 0
        cells = sum(len(row) for row in table.rows.values())
        lines.append(
            f"  [{table.index}] {table.label!r}: rows={len(array)} cols={width} "
            f"cells={cells} rules={_rule_summary(table.style)}"
        )

    return "\n".join(lines)


def _rule_summary(rules: list[dict]) -> str:
    if not rules:
        return "none"
    counter: Counter[str] = Counter(rule["type"] for rule in rules)
    return ", ".join(f"{kind}={counter[kind]}" for kind in sorted(counter))


def _to_string(value: object) -> str:
    if value is None:
        return "-"
    return str(value)
