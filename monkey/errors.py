from monkey.objects import ErrorVal


class MonkeyError(Exception):
    """Exception type used to propagate Monkey runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name

    @property
    def message(self) -> str:
        return self.err.message
