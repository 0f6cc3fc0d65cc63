"""fracbench -- exhaustive equivalence checks and shuffled speed benchmarks
for integer-to-decimal-fraction transforms."""

__version__ = "0.1.0"
