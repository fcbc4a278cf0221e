import logging
import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from pathlib import Path
from typing import Protocol, TypeVar

from .classifier import classify
from .config import Configuration
from .faults import ParseError, parse_fault, rule_fault
from .models import Diagnostic, RawFinding
from .registry import RuleRegistry
from .reporter import resolve
from .syntax import SourceUnit

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SourceParser(Protocol):
    """Anything that turns a file into a SourceUnit, raising ParseError on failure"""

    def parse_file(self, file_path: Path) -> SourceUnit: ...


class LinterEngine:
    """Core engine: classify each file, run its rules, resolve severities"""

    def __init__(
        self,
        config: Configuration | None = None,
        registry: RuleRegistry | None = None,
        parser: SourceParser | None = None,
        jobs: int | None = None,
    ):
        self.config = config or Configuration.defaults()
        self.registry = registry if registry is not None else RuleRegistry()
        self._parser = parser
        self.jobs = max(1, jobs or os.cpu_count() or 1)

    @property
    def parser(self) -> SourceParser:
        if self._parser is None:
            from cma_dart_tree import DartParser

            self._parser = DartParser()
        return self._parser

    def analyze(self, units: Iterable[SourceUnit]) -> list[Diagnostic]:
        """Lint already-parsed units"""
        return self._run(list(units), self.check_unit)

    def analyze_files(self, files: Iterable[Path | str]) -> list[Diagnostic]:
        """Parse and lint files; unparsable files produce a parse_error diagnostic"""
        return self._run([Path(f) for f in files], self.check_file)

    def check_unit(self, unit: SourceUnit) -> list[RawFinding]:
        """Run every applicable rule on one unit. Rule failures become findings."""
        role = classify(unit.path, self.config)
        findings: list[RawFinding] = []
        for rule in self.registry.rules_for(role, self.config):
            try:
                findings.extend(rule.check(unit, role, self.config))
            except Exception as exc:
                logger.warning("Rule %s failed on %s: %s", rule.rule_id, unit.path, exc, exc_info=True)
                findings.append(rule_fault(unit.path, rule.rule_id, exc).to_finding())
        return findings

    def check_file(self, file_path: Path) -> list[RawFinding]:
        try:
            unit = self.parser.parse_file(file_path)
        except ParseError as exc:
            logger.info("Skipping %s: %s", file_path, exc)
            return [parse_fault(str(file_path), str(exc), exc.line).to_finding()]
        except Exception as exc:
            # extraction failures are per-file, the rest of the run continues
            logger.warning("Could not extract %s: %s", file_path, exc, exc_info=True)
            message = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
            return [parse_fault(str(file_path), message).to_finding()]
        return self.check_unit(unit)

    def _run(self, items: list[T], worker: Callable[[T], list[RawFinding]]) -> list[Diagnostic]:
        if not self.config.lint_enabled:
            logger.debug("Linting disabled by configuration; %d file(s) skipped", len(items))
            return []

        logger.debug("Analyzing %d file(s) with %d worker(s)", len(items), self.jobs)
        if self.jobs == 1 or len(items) <= 1:
            batches = [worker(item) for item in items]
        else:
            with ThreadPoolExecutor(max_workers=min(self.jobs, len(items))) as pool:
                batches = list(pool.map(worker, items))

        return resolve(chain.from_iterable(batches), self.config)
