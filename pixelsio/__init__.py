"""Storage I/O for Pixels columnar files: buffers, bit masks, profilers, local reads and writes, request merging and scheduling."""

__version__ = "0.1.0"