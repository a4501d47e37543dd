import os
import sys
from typing import List, Optional

import pytest


def pytest_configure():
    # Ensure `src/` is importable as top-level for `common.*`/`state.*` imports
    root = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    src_path = os.path.join(root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


class FakeAccessControl:
    """Records every grant/release; refuses paths listed in `deny`."""

    def __init__(self) -> None:
        self.deny = set()
        self.started: List = []
        self.stopped: List = []

    def start_accessing(self, handle) -> bool:
        if handle.path in self.deny:
            return False
        self.started.append(handle.path)
        return True

    def stop_accessing(self, handle) -> None:
        self.stopped.append(handle.path)


class ScriptedPicker:
    """Picker fake: answers each present() with the next scripted handle
    (None = user cancels). `defer=True` keeps the completion for later."""

    def __init__(self, *answers, defer: bool = False) -> None:
        self._answers = list(answers)
        self.defer = defer
        self.requests: List = []
        self.pending: Optional[object] = None

    def present(self, request, completion) -> None:
        self.requests.append(request)
        if self.defer:
            self.pending = completion
            return
        answer = self._answers.pop(0) if self._answers else None
        if answer is None:
            completion.cancel()
        else:
            completion.resolve(answer)


@pytest.fixture
def access_control() -> FakeAccessControl:
    return FakeAccessControl()


@pytest.fixture
def make_picker():
    return ScriptedPicker
