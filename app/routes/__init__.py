from .garden_api import garden_api_bp

__all__ = ["garden_api_bp"]
