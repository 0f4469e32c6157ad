"""
admin_identity.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and the generic identity store.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The store contract (`db.store.IdentityStore`) is what services depend on; the
# SQLAlchemy implementation can be swapped without touching credential or admin logic.
