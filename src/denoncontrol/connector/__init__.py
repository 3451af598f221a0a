"""
Connectors open the conduit to a receiver's endpoint.
"""
