"""
Provides colored terminal output and confirmation prompts for stack deployments.
"""

import sys
from typing import Any, Dict, Optional, TextIO

from . import template_diff
from .stack_status import StackStatus


class Colors:
    """ANSI color codes for terminal output"""

    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"
    UNDERLINE = "\033[4m"


DIFF_COLORS = {
    template_diff.HEADER: Colors.OKCYAN,
    template_diff.ADD: Colors.OKGREEN,
    template_diff.REMOVE: Colors.FAIL,
}


class ProgressIndicator:
    """Line oriented output sink for a deploy invocation"""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        color: bool = True,
        assume_yes: bool = False,
    ):
        self._stream = stream
        self.color = color
        self.assume_yes = assume_yes

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _paint(self, text: str, *codes: str) -> str:
        if not self.color or not codes:
            return text
        return "".join(codes) + text + Colors.ENDC

    def _write(self, text: str = "", end: str = "\n"):
        print(text, end=end, file=self.stream, flush=True)

    def success(self, message: str):
        self._write(self._paint(f"[OK] {message}", Colors.OKGREEN))

    def warning(self, message: str):
        self._write(self._paint(f"[WARNING] {message}", Colors.WARNING))

    def error(self, message: str):
        self._write(self._paint(f"[ERROR] {message}", Colors.FAIL))

    def info(self, message: str):
        self._write(self._paint(f"[INFO] {message}", Colors.OKCYAN))

    def message(self, text: str):
        self._write(text)

    def newline(self):
        self._write()

    def field(self, name: str, value: Any):
        self._write(f"{self._paint(name + ':', Colors.BOLD)} {value}")

    def prompt(self, question: str) -> bool:
        """
        Ask a yes/no question. Anything but an explicit yes is a no,
        including end of input and Ctrl-C.
        """
        text = self._paint(f"{question} (y/N): ", Colors.BOLD)
        if self.assume_yes:
            self._write(text + "y")
            return True

        self._write(text, end="")
        try:
            choice = input().strip().lower()
        except (EOFError, KeyboardInterrupt):
            self.newline()
            return False

        return choice in ["y", "yes"]

    def change_set(self, text: str):
        self._write(text, end="")

    def diff_line(self, line: str, kind: str):
        color = DIFF_COLORS.get(kind)
        self._write(self._paint(line, color) if color else line)

    def stack_event(self, event: Dict[str, Any]):
        timestamp = event.get("Timestamp")
        if hasattr(timestamp, "strftime"):
            timestamp = timestamp.strftime("%H:%M:%S")

        parts = [
            str(timestamp or ""),
            event.get("LogicalResourceId", ""),
            event.get("ResourceType", ""),
            self._paint(event.get("ResourceStatus", ""), Colors.FAIL),
        ]
        if event.get("ResourceStatusReason"):
            parts.append(event["ResourceStatusReason"])

        self._write("  " + " ".join(part for part in parts if part))

    def status(self, status: StackStatus):
        """Announce a stack status; in-progress statuses are followed by dots."""
        if status.is_failed() or status.is_rollback():
            color = Colors.FAIL
        elif status.is_complete():
            color = Colors.OKGREEN
        else:
            color = Colors.WARNING

        self._write(self._paint(status, color), end="")
        if not status.is_terminal():
            self._write("...", end="")

    def dot(self):
        self._write(".", end="")

    def stack_output(self, output: Dict[str, Any]):
        self.field(output.get("OutputKey", ""), output.get("OutputValue", ""))

    def whoami(self, identity: Dict[str, Any], region: str):
        self.field("Account", identity.get("Account"))
        self.field("Arn", identity.get("Arn"))
        self.field("UserId", identity.get("UserId"))
        self.field("Region", region)
