"""Common utilities shared across the search service.

Includes:
- ``config``: Pydantic-based service configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers.
- ``errors``: validation and upstream error taxonomy.

Import pattern:
- from libs.common.config import SearchConfig
- from libs.common.logging import configure_logging
"""
