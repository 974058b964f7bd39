"""Backends for hypothesis tests."""

from pyreplication.hypothesis.backends.cpu import CPUHypothesisBackend

__all__ = ["CPUHypothesisBackend"]
