"""
GPU backend for replication-power simulations using PyTorch.

Each block of trials is drawn, transformed, sorted and tested as one
batched tensor. A trial rejects when |t| >= t_crit(df, alpha), which is
the p <= alpha rule without evaluating the t CDF on the device.

FP64 on CUDA, FP32 on MPS (no float64 kernels). Draws come from torch
generators seeded from the same SeedSequence tree as the CPU backend, so
results are reproducible per device but not identical to the CPU backend.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from scipy import stats as sp_stats

from pyreplication.core.result import Result
from pyreplication.core.compute.timing import Timer
from pyreplication.core.compute.device import DeviceInfo
from pyreplication.core.exceptions import SimulationError
from pyreplication.descriptive._robust import n_trimmed
from pyreplication.montecarlo._common import (
    FALSE_POSITIVE,
    TRUE_POSITIVE,
    SimulationParams,
)
from pyreplication.montecarlo.backends.cpu import block_seeds, population_targets
from pyreplication.montecarlo.design import SimulationDesign


def _torch_seed(seq: np.random.SeedSequence) -> int:
    # torch.Generator.manual_seed takes a signed 64-bit range
    return int(seq.generate_state(1, np.uint64)[0] >> np.uint64(1))


class GPUSimulationBackend:
    """
    GPU backend for replication-power simulations.

    Population targets are computed on the CPU with scipy; sampling and
    the trimmed t statistics run on the device.
    """

    def __init__(self, device: DeviceInfo | None = None):
        """
        Parameters
        ----------
        device : DeviceInfo, optional
            Device info from select_device(). If None, auto-selects.
        """
        import torch

        self._torch = torch

        if device is not None:
            if device.device_type == 'cuda':
                self.device = torch.device(f'cuda:{device.device_index or 0}')
                self._device_kind = 'cuda'
            elif device.device_type == 'mps':
                self.device = torch.device('mps')
                self._device_kind = 'mps'
            else:
                raise ValueError(
                    f"GPUSimulationBackend requires GPU device, got {device.device_type}"
                )
        elif torch.cuda.is_available():
            self.device = torch.device('cuda')
            self._device_kind = 'cuda'
        elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
            self.device = torch.device('mps')
            self._device_kind = 'mps'
        else:
            raise RuntimeError("No GPU available. Use backend='cpu' instead.")

        self.dtype = torch.float32 if self._device_kind == 'mps' else torch.float64

    @property
    def name(self) -> str:
        return f'gpu_{self._device_kind}_simulation'

    def solve(self, design: SimulationDesign) -> Result[SimulationParams]:
        """Run every trial of the design on the device."""
        timer = Timer(sync_cuda=self._device_kind == 'cuda')
        timer.start()

        shape = (design.n_trials, design.n_shapes, design.n_trims)
        false_positive = np.zeros(shape, dtype=np.bool_)
        true_positive = np.zeros(shape, dtype=np.bool_)
        warnings_list: list[str] = []
        if self.dtype == self._torch.float32:
            warnings_list.append(
                "MPS has no float64 support; trials ran in float32"
            )

        with timer.section('population_targets'):
            targets = population_targets(design.g_values, design.h, design.trims)

        n = design.n
        t_crit = []
        for trim in design.trims:
            df = n - 2 * n_trimmed(n, trim) - 1
            t_crit.append(float(sp_stats.t.ppf(1.0 - design.alpha / 2.0, df)))

        seeds = block_seeds(design.seed, design.n_shapes, design.n_blocks)

        with timer.section('trials'):
            for i in range(design.n_shapes):
                g = float(design.g_values[i])
                for b, (start, stop) in enumerate(design.block_bounds()):
                    for condition, seq, shift, out in (
                        (FALSE_POSITIVE, seeds[i][b][0], 0.0, false_positive),
                        (TRUE_POSITIVE, seeds[i][b][1], design.effect_size, true_positive),
                    ):
                        out[start:stop, i, :] = self._run_block(
                            seq, stop - start, n, g, design.h, shift,
                            design.trims, targets[i], t_crit, start, condition,
                        )

        timer.stop()

        params = SimulationParams(
            false_positive=false_positive,
            true_positive=true_positive,
            g_values=np.array(design.g_values, dtype=np.float64),
            h=design.h,
            trims=np.array(design.trims, dtype=np.float64),
            population_targets=targets,
            alpha=design.alpha,
            n=design.n,
            effect_size=design.effect_size,
            seed=design.seed,
            block_size=design.block_size,
        )

        return Result(
            params=params,
            info={
                'n_blocks': design.n_blocks,
                'block_size': design.block_size,
                'n_jobs': 1,
                'seed': design.seed,
                'device': str(self.device),
                'dtype': str(self.dtype),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _run_block(
        self,
        seq: np.random.SeedSequence,
        m: int,
        n: int,
        g: float,
        h: float,
        shift: float,
        trims: tuple[float, ...],
        targets: Any,
        t_crit: list[float],
        start: int,
        condition: str,
    ) -> np.ndarray:
        """Reject indicators, shape (m, n_trims), for one block."""
        torch = self._torch
        gen = torch.Generator(device=self.device)
        gen.manual_seed(_torch_seed(seq))

        z = torch.randn((m, n), generator=gen, device=self.device, dtype=self.dtype)
        x = z if g == 0.0 else torch.expm1(g * z) / g
        if h != 0.0:
            x = x * torch.exp(h * z * z / 2.0)
        x = torch.sort(x + shift, dim=1).values

        out = np.empty((m, len(trims)), dtype=np.bool_)
        for j, trim in enumerate(trims):
            k = n_trimmed(n, trim)
            tm = x[:, k:n - k].mean(dim=1)
            w = torch.clamp(x, min=x[:, k:k + 1], max=x[:, n - k - 1:n - k])
            wv = w.var(dim=1, unbiased=True)
            se = torch.sqrt(wv) / ((1.0 - 2.0 * trim) * math.sqrt(n))

            zero = se == 0
            if bool(zero.any()):
                index = int(torch.nonzero(zero)[0, 0])
                raise SimulationError(
                    f"{condition.replace('_', ' ')} trial {start + index} failed "
                    f"for g={g:g}, h={h:g}, trim={trim:g}: sample has zero "
                    f"winsorized variance",
                    g=g, h=h, trim=trim, trial=start + index,
                )

            t = (tm - float(targets[j])) / se
            out[:, j] = (t.abs() >= t_crit[j]).cpu().numpy()
        return out
