def a():
    b()


def b():
    pass


def c():
    pass
