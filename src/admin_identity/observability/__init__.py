"""
admin_identity.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Core modules only call `get_logger`; configuration happens once in the API app factory.
