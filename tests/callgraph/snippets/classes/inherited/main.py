class Base:
    def greet(self) -> str:
        return "hello"


class Child(Base):
    def shout(self) -> str:
        return self.greet().upper()


def run_all() -> None:
    child = Child()
    child.greet()
