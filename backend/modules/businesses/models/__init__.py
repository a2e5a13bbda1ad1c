from .business_models import BusinessProfile

__all__ = ["BusinessProfile"]
