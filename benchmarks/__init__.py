"""Performance benchmarks for qsimcore.

This package contains microbenchmarks for hot paths in the library:
gate application and circuit simulation before and after optimization.
"""
