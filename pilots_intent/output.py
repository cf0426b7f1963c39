"""Run artifacts for prediction studies.

Each run gets its own directory holding figures, trajectory tables, a JSON
summary and a plain-text log:

    outputs/constant_pitch_20240101_120000/
        plots/           figures (png, pdf, svg)
        data/            trajectory CSVs and summaries
        run.log          lines passed to log()
        metadata.json    written when the context exits

Example:
    >>> from pilots_intent.output import OutputContext
    >>> with OutputContext("constant_pitch") as ctx:
    ...     ctx.save_prediction(prediction, "trajectory.csv")
    ...     ctx.save_figure(plot_trajectory_xy(prediction), "trajectory.png")
    ...     ctx.save_summary(prediction.summary())
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
from beartype import beartype
from matplotlib.figure import Figure

from pilots_intent.simulation.predict import Prediction

# Default subdirectory per file suffix
_SUBDIR_BY_SUFFIX = {
    **dict.fromkeys((".png", ".pdf", ".svg", ".jpg", ".jpeg"), "plots"),
    **dict.fromkeys((".csv", ".json", ".parquet", ".npy", ".npz"), "data"),
}


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, default=str))


@beartype
class OutputContext:
    """Directory for one prediction run, used as a context manager.

    Attributes:
        name: Run name
        output_dir: Run directory
        timestamp: When the context was created
    """

    SUBDIRS = ("plots", "data")

    def __init__(
        self,
        name: str,
        base_dir: str | Path | None = None,
        include_timestamp: bool = True,
    ) -> None:
        """Prepare (but do not create) the run directory.

        Args:
            name: Run name, used as the directory prefix
            base_dir: Parent directory. Defaults to ./outputs/
            include_timestamp: Append _YYYYmmdd_HHMMSS to the directory name
        """
        self.name = name
        self.timestamp = datetime.now()

        root = Path.cwd() / "outputs" if base_dir is None else Path(base_dir)
        suffix = self.timestamp.strftime("_%Y%m%d_%H%M%S") if include_timestamp else ""
        self.output_dir = root / f"{name}{suffix}"

        self._files: list[str] = []
        self._extra: dict[str, Any] = {}
        self._active = False

    def __enter__(self) -> "OutputContext":
        for subdir in self.SUBDIRS:
            (self.output_dir / subdir).mkdir(parents=True, exist_ok=True)
        self._active = True
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        metadata: dict[str, Any] = {
            "name": self.name,
            "created": self.timestamp.isoformat(),
            "completed": datetime.now().isoformat(),
            "success": exc_type is None,
            "files": self._files,
            **self._extra,
        }
        if exc_val is not None:
            metadata["error"] = f"{type(exc_val).__name__}: {exc_val}"

        _write_json(self.output_dir / "metadata.json", metadata)
        self._active = False

    def path(self, filename: str, subdir: str | None = None) -> Path:
        """Path for an output file inside the run directory.

        Without ``subdir`` the file goes to plots/ or data/ by suffix, or to
        the run directory itself for unknown suffixes. The file is listed in
        metadata.json.
        """
        if not self._active:
            raise RuntimeError("OutputContext must be used as a context manager")

        if subdir is None:
            subdir = _SUBDIR_BY_SUFFIX.get(Path(filename).suffix.lower(), "")

        target = self.output_dir / subdir / filename
        self._files.append(target.relative_to(self.output_dir).as_posix())
        return target

    def save_figure(self, fig: Figure, filename: str, dpi: int = 150) -> Path:
        """Write a figure and close it."""
        target = self.path(filename)
        fig.savefig(target, dpi=dpi, bbox_inches="tight")
        plt.close(fig)
        return target

    def save_prediction(self, prediction: Prediction, filename: str = "trajectory.csv") -> Path:
        """Write the state history as CSV: time plus one column per component."""
        target = self.path(filename, subdir="data")
        prediction.to_dataframe().write_csv(target)
        return target

    def save_summary(self, summary: dict[str, Any], filename: str = "summary.json") -> Path:
        target = self.path(filename, subdir="data")
        _write_json(target, summary)
        return target

    def add_metadata(self, key: str, value: Any) -> None:
        """Record an extra JSON-serializable entry in metadata.json."""
        self._extra[key] = value

    def log(self, message: str) -> None:
        """Print a message with a clock prefix and append it to run.log."""
        line = f"[{datetime.now():%H:%M:%S}] {message}"
        print(line)
        with (self.output_dir / "run.log").open("a") as f:
            f.write(line + "\n")
