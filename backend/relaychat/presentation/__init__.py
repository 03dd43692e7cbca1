"""
Presentation Layer - HTTP and live (WebSocket) bindings.

Thin layer: parses input, calls application handlers, shapes output.
"""
