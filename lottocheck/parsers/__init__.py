"""Per-source extraction of upstream payloads into normalized values."""
