"""
Simulation backends.

CPU backend always available; GPU backend requires PyTorch with CUDA or MPS.
"""

from pyreplication.montecarlo.backends.cpu import CPUSimulationBackend

__all__ = ["CPUSimulationBackend"]
