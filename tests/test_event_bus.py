from pulsechart.infrastructure.event_bus import WARNING, EventBus


def test_fan_out_in_subscription_order():
    bus = EventBus()
    received = []
    bus.subscribe(WARNING, lambda m: received.append(("a", m)), "a")
    bus.subscribe(WARNING, lambda m: received.append(("b", m)), "b")
    assert bus.publish(WARNING, "x") == 2
    assert received == [("a", "x"), ("b", "x")]


def test_failing_handler_is_isolated():
    bus = EventBus()
    received = []

    def boom(_):
        raise RuntimeError("boom")

    bus.subscribe(WARNING, boom, "faulty")
    bus.subscribe(WARNING, received.append, "ok")
    assert bus.publish(WARNING, "x") == 1
    assert received == ["x"]


def test_unsubscribe():
    bus = EventBus()
    received = []
    bus.subscribe(WARNING, received.append)
    bus.unsubscribe(WARNING, received.append)
    bus.publish(WARNING, "x")
    assert received == []


def test_unsubscribe_all():
    bus = EventBus()
    bus.subscribe("a", print)
    bus.subscribe("b", print)
    bus.unsubscribe_all("a")
    assert bus.subscriber_count == 1
    bus.unsubscribe_all()
    assert bus.subscriber_count == 0
