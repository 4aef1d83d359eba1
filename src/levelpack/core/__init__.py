"""Geometric primitives, errors and packing verification."""
