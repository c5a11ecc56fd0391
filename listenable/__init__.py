"""
Event-firing interception for automation drivers.

This package wraps a driver, and every element or handle derived from it, in
transparent proxies that notify registered listeners before and after each
operation and report failures by their root cause.

Start with ``listenable.events.factory.create_intercepted_root``.
"""
