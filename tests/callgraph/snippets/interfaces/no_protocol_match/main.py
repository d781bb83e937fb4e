from typing import Protocol


class Sized(Protocol):
    def size(self, unit: str) -> int:
        ...


class Box:
    def size(self) -> int:
        return measure()


def measure() -> int:
    return 1
