"""
Utility modules for record transformations

Provides:
- logging: structured logging setup
- tracing: OpenTelemetry span helpers
- metrics: Prometheus metric registration helper
"""

__version__ = "1.0.0"
__all__ = ["logging", "tracing", "metrics"]
