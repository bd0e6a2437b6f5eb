from typing import Dict, Optional

from monkey.objects import Object


class Environment:
    """Maps identifiers to runtime values.

    A program is evaluated against a single environment: blocks share
    the environment of the code around them, so a `let` inside an `if`
    body is visible after it. An environment may be layered on top of an
    `outer` one; lookups fall back to the outer environment while writes
    always land in this one.
    """
    def __init__(self, outer: Optional['Environment'] = None):
        self.outer = outer
        self.store: Dict[str, Object] = {}

    def get(self, name: str) -> Optional[Object]:
        if name in self.store:
            return self.store[name]
        if self.outer is not None:
            return self.outer.get(name)
        return None

    def set(self, name: str, value: Object) -> Object:
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        bindings = ', '.join(f"{k}={v}" for k, v in self.store.items())
        return f"Environment({bindings})"
