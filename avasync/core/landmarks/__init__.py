"""Landmark renormalization and face subset projection."""
