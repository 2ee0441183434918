"""csim: a trace-driven set-associative cache simulator with LRU replacement."""

__version__ = "0.1.0"
