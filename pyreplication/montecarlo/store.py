"""
On-disk store for simulation runs.

One compressed .npz bundle per run id, holding both indicator arrays and
everything needed to interpret them. Bundles are written to a temporary
file in the same directory and moved into place with os.replace, so a
reader never sees a partial bundle and a failed run leaves no file.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

import numpy as np

from pyreplication.core.exceptions import ValidationError
from pyreplication.core.result import Result
from pyreplication.montecarlo._common import SimulationParams
from pyreplication.montecarlo.solution import SimulationSolution

FORMAT_VERSION = 1

_RUN_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class ResultStore:
    """
    Directory of persisted simulation runs keyed by run id.

    Usage:
        store = ResultStore("results")
        store.save("gh_h0", solution)
        if "gh_h0" in store:
            solution = store.load("gh_h0")
    """

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def path_for(self, run_id: str) -> Path:
        """Bundle path of a run id. Run ids are plain file stems."""
        if not isinstance(run_id, str) or not _RUN_ID.match(run_id):
            raise ValidationError(
                f"run_id must be a non-empty name of letters, digits, '_', "
                f"'-' or '.', got {run_id!r}"
            )
        return self.root / f"{run_id}.npz"

    def __contains__(self, run_id: str) -> bool:
        return self.path_for(run_id).is_file()

    def save(self, run_id: str, solution: SimulationSolution) -> Path:
        """Write the run atomically, replacing any existing bundle."""
        path = self.path_for(run_id)
        self.root.mkdir(parents=True, exist_ok=True)
        p = solution.params

        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{run_id}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                np.savez_compressed(
                    f,
                    format_version=np.int64(FORMAT_VERSION),
                    run_id=np.str_(run_id),
                    backend_name=np.str_(solution.backend_name),
                    false_positive=p.false_positive,
                    true_positive=p.true_positive,
                    g_values=p.g_values,
                    n_shapes=np.int64(p.n_shapes),
                    h=np.float64(p.h),
                    trims=p.trims,
                    population_targets=p.population_targets,
                    alpha=np.float64(p.alpha),
                    n=np.int64(p.n),
                    effect_size=np.float64(p.effect_size),
                    # Seeds may exceed the int64 range
                    seed=np.str_(str(p.seed)),
                    block_size=np.int64(p.block_size),
                )
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        return path

    def load(self, run_id: str) -> SimulationSolution:
        """
        Read a run back.

        Raises:
            FileNotFoundError: If no bundle exists for run_id.
            ValidationError: If the bundle has an unknown format version.
        """
        path = self.path_for(run_id)
        if not path.is_file():
            raise FileNotFoundError(f"no stored run {run_id!r} at {path}")

        with np.load(path, allow_pickle=False) as data:
            version = int(data["format_version"])
            if version != FORMAT_VERSION:
                raise ValidationError(
                    f"{path}: unsupported format version {version}, "
                    f"expected {FORMAT_VERSION}"
                )
            params = SimulationParams(
                false_positive=data["false_positive"],
                true_positive=data["true_positive"],
                g_values=data["g_values"],
                h=float(data["h"]),
                trims=data["trims"],
                population_targets=data["population_targets"],
                alpha=float(data["alpha"]),
                n=int(data["n"]),
                effect_size=float(data["effect_size"]),
                seed=int(str(data["seed"])),
                block_size=int(data["block_size"]),
            )
            backend_name = str(data["backend_name"])

        result = Result(
            params=params,
            info={'run_id': run_id, 'path': str(path)},
            timing=None,
            backend_name=backend_name,
        )
        return SimulationSolution(result)
