from .jasper import JasperClient, InputControlDomain

__all__ = ["JasperClient", "InputControlDomain"]
