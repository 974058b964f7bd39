"""
Core protocols for pyreplication.

Backends are described structurally (Protocol) rather than nominally
(ABC), so the CPU and GPU Monte Carlo backends and the hypothesis
backend share one contract without a common base class.
"""

from typing import Protocol, TypeVar, runtime_checkable

P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend takes a domain-specific design and produces a
    domain-specific parameter payload wrapped in a Result. Backends are
    stateless apart from construction-time device selection.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{domain}'
        Examples: 'cpu_hypothesis', 'cpu_simulation', 'gpu_cuda_simulation'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the statistical computation.

        Raises:
            ConvergenceError: If a numerical solve fails to converge
            NumericalError: If a sample is degenerate
            SimulationError: If a Monte Carlo cell fails
        """
        ...
