def load(path):
    try:
        return open(path).read()
    except:
        return None


def evaluate(expr):
    print("evaluating", expr)
    return eval(expr)
