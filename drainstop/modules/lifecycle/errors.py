from typing import List, Tuple


class LifecycleError(Exception):
    pass

class TeardownError(LifecycleError):
    def __init__(self, failures: List[Tuple[str, BaseException]]):
        self.failures = failures
        details = "; ".join(f"{name}: {err}" for name, err in failures)
        super().__init__(f"Failed to close {len(failures)} resource(s): {details}")
