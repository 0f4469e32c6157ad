"""
admin_identity.api

HTTP transport for the identity service.

Responsibilities:
- FastAPI app factory and router modules.
- The explicit method registration table exposed to clients.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + delegation to services.
