"""Fixed-point envelopes, LFO, lookup tables, routing algorithms, patch unpacking,
FIR filters and per-note operator parameters for DX7-style FM synthesis."""

__version__ = "0.1.0"