class Engine:
    def __init__(self, power: int) -> None:
        self.power = power

    def start(self) -> bool:
        return self.check()

    def check(self) -> bool:
        return self.power > 0


def build() -> Engine:
    engine = Engine(10)
    engine.start()
    return engine
