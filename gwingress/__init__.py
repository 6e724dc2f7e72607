"""Gateway API ingress helpers: resource models, probe target discovery and load balancer status."""

__version__ = "0.1.0"

__all__ = ["models", "lister", "ingress"]