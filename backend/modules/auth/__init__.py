# backend/modules/auth/__init__.py

"""Users, identity hand-over and role management."""
