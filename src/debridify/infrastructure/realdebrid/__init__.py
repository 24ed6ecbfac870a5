from .client import RealDebridClient

__all__ = ["RealDebridClient"]
