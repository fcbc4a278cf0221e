from typing import Optional

from pydantic import BaseModel

from cma_lint.models import Severity


class LintIssue(BaseModel):
    severity: Severity
    file_path: str
    line_number: int
    column: int
    end_line_number: Optional[int] = None
    end_column: Optional[int] = None
    rule_id: str
    message: str
    suggestion: Optional[str] = None


class LintReport(BaseModel):
    issues: list[LintIssue]
    files_checked: int
    errors: int
    warnings: int
    infos: int
