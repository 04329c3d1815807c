"""Trade event pipeline: events, binary codec, queues, decoding workers, metrics and a demo command."""

__version__ = "0.1.0"

__all__ = ["cli", "codec", "metrics", "processor", "queue", "trade_event"]