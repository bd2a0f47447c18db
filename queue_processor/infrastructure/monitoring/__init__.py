from .metrics import ProcessorMetrics

__all__ = ["ProcessorMetrics"]
