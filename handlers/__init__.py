"""
handlers/ - Presentation Layer
================================
HTTP route handlers. Each handler receives a request, delegates to the
appropriate Repository, and returns the result as JSON.
No business logic lives here; errors are translated in error_handler.py.
"""
