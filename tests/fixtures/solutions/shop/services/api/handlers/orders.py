def handle(order):
    try:
        order.submit()
    except:
        pass
