"""
admin_identity.api.routers

Router modules mounted by `admin_identity.api.app`.
"""
