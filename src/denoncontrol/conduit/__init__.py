"""
The conduit package provides an abstraction of a bi-directional byte stream to a receiver.
Concrete implementations are a TCP socket and an in-memory buffer used by tests and bounded feeds.
"""
