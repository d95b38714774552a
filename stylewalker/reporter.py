from stylewalker.findings import Severity


def sorted_findings(result) -> list:
    """Findings ordered by (line, column, rule id); ties keep traversal order."""
    return sorted(result.findings, key=lambda item: item.sort_key())


def format_finding(finding) -> str:
    return (
        f"{finding.location.line}:{finding.location.column} "
        f"[{finding.severity.value}] {finding.rule_id}: {finding.message}"
    )


def _plural(count, word):
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_summary(result) -> str:
    parts = [_plural(result.count(severity), severity.value) for severity in (Severity.ERROR, Severity.WARNING)]
    return ", ".join(parts)


def format_result(result) -> str:
    lines = [format_finding(item) for item in sorted_findings(result)]
    lines.append(format_summary(result))
    return "\n".join(lines)


def to_payload(result) -> dict:
    summary = result.summary
    summary["total"] = result.total
    return {
        "findings": [
            {
                "line": item.location.line,
                "column": item.location.column,
                "severity": item.severity.value,
                "rule_id": item.rule_id,
                "message": item.message,
            }
            for item in sorted_findings(result)
        ],
        "summary": summary,
    }
