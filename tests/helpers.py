"""Assertions shared between the test modules."""


def assert_valid_chain(signal) -> None:
    """Check the listener list is a consistent doubly-linked chain."""
    seen = []
    node = signal.head
    if node is not None:
        assert node.prev is None
    while node is not None:
        assert node.connected
        assert node.signal is signal
        assert node not in seen, "cycle in listener list"
        if node.next is not None:
            assert node.next.prev is node
        if node.prev is not None:
            assert node.prev.next is node
        seen.append(node)
        node = node.next
    assert list(signal.connections) == seen
