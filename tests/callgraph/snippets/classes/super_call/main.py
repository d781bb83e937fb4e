class Shape:
    def __init__(self, name: str) -> None:
        self.name = name


class Square(Shape):
    def __init__(self, side: int) -> None:
        super().__init__("square")
        self.side = side
