"""
Streamo Server Package.

This package contains the web server implementation for the Streamo back-office.
It includes the API definition, configuration, middleware, exception handlers and
the service layer that sits between the routers and the repositories.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration settings and API constants.
    services: Business logic shared by several routers.
    middleware: Request tracing middleware.
    exception_handlers: Mapping of domain errors to HTTP responses.
"""
