from cma_lint.models import Diagnostic

from .models import LintIssue


def diagnostic_to_lint_issue(diagnostic: Diagnostic) -> LintIssue:
    """Convert an internal dataclass diagnostic to an external Pydantic issue"""
    return LintIssue(
        severity=diagnostic.severity,
        file_path=diagnostic.file_path,
        line_number=diagnostic.line,
        column=diagnostic.column,
        end_line_number=diagnostic.span.end_line,
        end_column=diagnostic.span.end_column,
        rule_id=diagnostic.rule_id,
        message=diagnostic.message,
        suggestion=diagnostic.correction,
    )


def format_issue(issue: LintIssue) -> str:
    return (
        f"{issue.severity.value.upper()}: {issue.file_path}:{issue.line_number}:{issue.column} "
        f"[{issue.rule_id}] - {issue.message}"
    )
