from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--rows", "160", "--cols", "160"]
SAVED_GRID = EXAMPLES_ROOT / "save-grid" / "grid.txt"


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return [sys.executable, "render.py", *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="default-region",
        args=[*BASE_ARGS, "--output", str(EXAMPLES_ROOT / "default-region" / "mandelbrot.png")],
        expected=[Expected(EXAMPLES_ROOT / "default-region" / "mandelbrot.png")],
        clean=[EXAMPLES_ROOT / "default-region"],
    ),
    Example(
        name="seahorse-valley",
        args=[*BASE_ARGS, "--x-start", "-0.8", "--y-start", "0.05", "--width", "0.1", "--height", "0.1",
              "--max-iterations", "400", "--output", str(EXAMPLES_ROOT / "seahorse-valley" / "seahorse.png")],
        expected=[Expected(EXAMPLES_ROOT / "seahorse-valley" / "seahorse.png")],
        clean=[EXAMPLES_ROOT / "seahorse-valley"],
    ),
    Example(
        name="tensorflow",
        args=[*BASE_ARGS, "--backend", "tensorflow", "--output", str(EXAMPLES_ROOT / "tensorflow" / "vectorized.png")],
        expected=[Expected(EXAMPLES_ROOT / "tensorflow" / "vectorized.png")],
        clean=[EXAMPLES_ROOT / "tensorflow"],
    ),
    Example(
        name="save-grid",
        args=[*BASE_ARGS, "--save-grid", str(SAVED_GRID)],
        expected=[Expected(SAVED_GRID)],
        clean=[EXAMPLES_ROOT / "save-grid"],
    ),
    Example(
        name="load-grid",
        args=["--load-grid", str(SAVED_GRID), "--output", str(EXAMPLES_ROOT / "load-grid" / "reloaded.tif")],
        expected=[Expected(EXAMPLES_ROOT / "load-grid" / "reloaded.tif")],
        clean=[EXAMPLES_ROOT / "load-grid"],
    ),
    Example(
        name="legacy-palette",
        args=["--load-grid", str(SAVED_GRID), "--palette", "legacy",
              "--output", str(EXAMPLES_ROOT / "legacy-palette" / "legacy.png")],
        expected=[Expected(EXAMPLES_ROOT / "legacy-palette" / "legacy.png")],
        clean=[EXAMPLES_ROOT / "legacy-palette"],
    ),
    Example(
        name="eight-bit",
        args=[*BASE_ARGS, "--output", str(EXAMPLES_ROOT / "eight-bit" / "preview.jpg")],
        expected=[Expected(EXAMPLES_ROOT / "eight-bit" / "preview.jpg")],
        clean=[EXAMPLES_ROOT / "eight-bit"],
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose", "--output", str(EXAMPLES_ROOT / "verbose" / "diagnostic.png")],
        expected=[Expected(EXAMPLES_ROOT / "verbose" / "diagnostic.png")],
        clean=[EXAMPLES_ROOT / "verbose"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean(example.clean or [])
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
