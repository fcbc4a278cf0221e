from collections import Counter
from collections.abc import Iterable

from .config import Configuration
from .models import Diagnostic, RawFinding, Severity


def resolve(raw_findings: Iterable[RawFinding], config: Configuration) -> list[Diagnostic]:
    """Attach configured severities, drop ignored findings, sort for stable output"""
    diagnostics = []
    for finding in raw_findings:
        severity = config.severity_of(finding.rule_id, finding.default_severity)
        if severity is Severity.IGNORE:
            continue
        diagnostics.append(
            Diagnostic(
                rule_id=finding.rule_id,
                file_path=finding.file_path,
                span=finding.span,
                message=finding.message,
                severity=severity,
                correction=finding.correction,
            )
        )
    return sorted(diagnostics, key=sort_key)


def sort_key(diagnostic: Diagnostic) -> tuple:
    span = diagnostic.span
    return (diagnostic.file_path, span.line, span.column, diagnostic.rule_id, diagnostic.message)


def has_blocking(diagnostics: Iterable[Diagnostic], threshold: Severity = Severity.ERROR) -> bool:
    return any(d.severity >= threshold for d in diagnostics)


def summarize(diagnostics: Iterable[Diagnostic]) -> dict[Severity, int]:
    counts = Counter(d.severity for d in diagnostics)
    return {severity: counts.get(severity, 0) for severity in Severity if severity is not Severity.IGNORE}
