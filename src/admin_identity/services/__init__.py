"""
admin_identity.services

Service-layer package.

Responsibilities:
- Compose the identity store and credential service into domain-facing APIs.
- Enforce soft-delete semantics (existence guard) where required.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake stores/hashers.
