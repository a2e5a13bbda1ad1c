# backend/modules/businesses/__init__.py

"""Business profiles: public browsing and owner-managed admin endpoints."""
