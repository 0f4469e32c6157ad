"""
admin_identity.auth

Credential package.

Responsibilities:
- JWT issuing and validation helpers.
- Password hashing on a bounded worker pool.
- Generic CredentialService (login, token checks, password change) per entity kind.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here knows about admins specifically; the role tag and entity class are
# constructor arguments.
