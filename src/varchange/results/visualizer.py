"""Charting of result files by an external R script."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol

from ..exceptions import AnalysisSetupError
from ..logging_config import get_logger
from .writer import RESULT_FILE_NAME

logger = get_logger(__name__)

# R packages the visualization scripts load
REQUIRED_R_PACKAGES = ("Hmisc", "nortest")


class Visualizer(Protocol):
    """Anything able to turn a result file into charts."""

    def visualize(self, result_file: Path, output_dir: Path, spl: str) -> bool: ...


class RScriptVisualizer:
    """Runs ``Rscript <script> <result file> <output dir> <spl>``.

    Usage:
        visualizer = RScriptVisualizer(Path("scripts/ComVi.R"))
        visualizer.check_environment()  # at setup, raises if R is missing
        ...
        ok = visualizer.visualize(result_file, output_dir, "linux")
    """

    def __init__(self, script: Path, timeout: int | None = None) -> None:
        self.script = Path(script)
        self.timeout = timeout

    def check_environment(self) -> None:
        """Verify the script, R and the required R packages are available.

        Raises:
            AnalysisSetupError: If anything needed for visualizing is missing
        """
        if not self.script.is_file():
            raise AnalysisSetupError(f'Visualization script "{self.script}" does not exist')

        version = self._run(["Rscript", "--version"])
        if version is None or version.returncode != 0:
            raise AnalysisSetupError("Missing R-environment for visualizing results")
        # Rscript prints its version to stderr, e.g. "R scripting front-end version 4.3.1"
        version_text = version.stderr or version.stdout or ""
        if not version_text.startswith("R "):
            raise AnalysisSetupError("Missing R-environment for visualizing results")

        packages = self._run(["R", "-q", "-e", "installed.packages()[,1]"])
        if packages is None or packages.returncode != 0:
            raise AnalysisSetupError("Cannot determine installed R packages")
        if not packages.stdout:
            raise AnalysisSetupError("Listing installed R packages returned no output")
        missing = [p for p in REQUIRED_R_PACKAGES if p not in packages.stdout]
        if missing:
            raise AnalysisSetupError(
                f"Missing R packages {', '.join(missing)}; "
                "please install them as part of the R installation"
            )

    def visualize(self, result_file: Path, output_dir: Path, spl: str) -> bool:
        if not self._check_inputs(Path(result_file), Path(output_dir)):
            return False

        logger.debug('Executing main script "%s"', self.script.resolve())
        command = [
            "Rscript",
            str(self.script.resolve()),
            str(Path(result_file).resolve()),
            str(Path(output_dir).resolve()),
            spl,
        ]
        result = self._run(command)
        if result is None:
            return False
        if result.returncode != 0:
            details = result.stderr or result.stdout
            logger.error("Visualizing results failed: %s", details.strip())
            return False
        return True

    def _check_inputs(self, result_file: Path, output_dir: Path) -> bool:
        if not result_file.exists():
            logger.error('Invalid input for visualization: "%s" does not exist', result_file)
            return False
        if not result_file.is_file() or result_file.name != RESULT_FILE_NAME:
            logger.error(
                'Invalid input for visualization: "%s" is not an analysis result file "%s"',
                result_file,
                RESULT_FILE_NAME,
            )
            return False
        if not output_dir.is_dir():
            logger.error(
                'Invalid input for visualization: "%s" is not a directory for saving '
                "visualizations",
                output_dir,
            )
            return False
        return True

    def _run(self, command: list[str]) -> subprocess.CompletedProcess | None:
        try:
            return subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("Running %s failed: %s", command[0], e)
            return None
