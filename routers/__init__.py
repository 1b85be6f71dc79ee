"""
API routers, one module per resource under /api.
"""
