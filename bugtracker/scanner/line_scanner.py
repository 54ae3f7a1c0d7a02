"""
Line Scanner
============
Applies every registered pattern to every line of a file's text.

OUTPUT CONTRACT:
  scan_text(text, file_name, file_path, file_url) -> ScanResult
  One Finding per (line, pattern) match, ordered by line number and then by
  registry order. No early exit, no merging of findings on the same line.

`bug_type` carries the pattern category; `error_message` carries the
trimmed source line so the stored row shows what triggered it.

Pure function: no I/O, no shared mutable state.
"""
from typing import Optional

from bugtracker.models.finding import Finding, ScanResult
from bugtracker.scanner.patterns import DEFAULT_REGISTRY, PatternRegistry


def scan_text(
    text: str,
    file_name: str,
    file_path: Optional[str] = None,
    file_url: Optional[str] = None,
    registry: PatternRegistry = DEFAULT_REGISTRY,
) -> ScanResult:
    if not text:
        return []

    findings: ScanResult = []
    for index, line in enumerate(text.split("\n"), start=1):
        for pattern in registry:
            if pattern.matches(line):
                findings.append(Finding(
                    file_name=file_name,
                    file_path=file_path,
                    file_url=file_url,
                    line_number=index,
                    bug_type=pattern.category,
                    error_message=line.strip(),
                    suggested_fix=pattern.hint,
                ))
    return findings
