"""Policy payment-recovery inference package."""

__all__ = [
    "config",
    "dates",
    "errors",
    "extractor",
    "inference",
    "lookup",
    "matcher",
    "report",
    "schemas",
    "status",
    "tables",
    "web_app",
]
