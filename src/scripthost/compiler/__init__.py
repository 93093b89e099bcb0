"""Adapters between the resolved import graph and the evaluation engine."""
