"""
Lint Service
============
Runs an external static-analysis command over a file's text and converts
its output into LintMessage objects.

The command receives the source on stdin (pyflakes by default, which
reads stdin when given no paths) and reports lines such as:

    <stdin>:10:5: undefined name 'foo'
    <stdin>:3: 'os' imported but unused

A non-zero exit code only means diagnostics were found. A missing binary or
a timeout raises LintError; output lines that do not look like
diagnostics are ignored.
"""
import asyncio
import logging
import re
import subprocess
from typing import List, Protocol, Sequence

from bugtracker.core.errors import LintError
from bugtracker.models.upload import LintMessage

logger = logging.getLogger(__name__)

# path:line[:col]: message
_LINE_RE = re.compile(r"^(.+?):(\d+):(?:\d+:)?\s*(.+)$", re.MULTILINE)


class Linter(Protocol):
    async def lint_text(self, text: str) -> List[LintMessage]:
        ...


def parse_lint_output(output: str) -> List[LintMessage]:
    messages: list[LintMessage] = []
    for match in _LINE_RE.finditer(output):
        line_str, msg = match.group(2), match.group(3).strip()
        if not msg:
            continue
        messages.append(LintMessage(line=int(line_str), message=msg))
    return messages


class CommandLinter:

    def __init__(self, command: Sequence[str], timeout: float = 60.0) -> None:
        self.command = list(command)
        self.timeout = timeout

    def _run(self, text: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            self.command,
            input=text,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    async def lint_text(self, text: str) -> List[LintMessage]:
        tool = self.command[0] if self.command else "<none>"
        try:
            result = await asyncio.to_thread(self._run, text)
        except FileNotFoundError as e:
            raise LintError(f"Lint command not found: {tool}") from e
        except subprocess.TimeoutExpired as e:
            raise LintError(f"Lint command timed out after {self.timeout:.0f}s") from e

        output = (result.stdout + result.stderr).strip()
        messages = parse_lint_output(output)
        logger.info("Lint (%s) exit=%d produced %d message(s)", tool, result.returncode, len(messages))
        return messages
