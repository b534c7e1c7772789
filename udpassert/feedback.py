import inspect
import os

import pytest


class Recorder:
    """
    Collects assertion failures for one test.

    error() records a message and lets the test go on; fatal() aborts the
    test right away. check() fails the test if anything was recorded.
    """

    def __init__(self):
        self.errors = []

    @property
    def failed(self):
        return bool(self.errors)

    def error(self, msg):
        self.errors.append(msg)

    def fatal(self, msg):
        self.errors.append(msg)
        pytest.fail(msg, pytrace=False)

    def check(self):
        if self.errors:
            pytest.fail("\n".join(self.errors), pytrace=False)


def caller_location(depth=2):
    """Return "file:line" of the frame `depth` calls above this one."""
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            frame = frame.f_back
        return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"
    finally:
        del frame


def make_report(location, lines, got=None):
    """Common failure report: where, what went wrong, what was captured."""
    report = [f"At: {location}"]
    report.extend(lines)
    if got is not None:
        report.append(f"But got: {got!r}")
    return "\n".join(report)
