from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

log = logging.getLogger(__name__)


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def which(cmd: str, extra_dir: Optional[str | Path] = None) -> Optional[str]:
    """Return full path of `cmd` if found in `extra_dir` or on PATH, else None."""
    if extra_dir is not None:
        search = os.pathsep.join([str(extra_dir), os.environ.get("PATH", "")])
        return shutil.which(cmd, path=search)
    return shutil.which(cmd)


def run_cmd(
    cmd: List[str],
    cwd: Optional[str | Path] = None,
    check: bool = True,
    capture: bool = False,
) -> subprocess.CompletedProcess:
    """Run a subprocess, logging the command line first."""
    log.debug("running: %s", " ".join(cmd))
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd is not None else None,
        check=check,
        text=True,
        capture_output=capture,
    )


def prefixed_path(outprefix: str | Path, suffix: str) -> Path:
    """`{outprefix}{suffix}`, e.g. prefixed_path("out/run1", "_plot.png")."""
    return Path(f"{outprefix}{suffix}")


class IntermediateFiles:
    """Track per-run scratch files and delete them when the run ends.

    Files are removed on both the success and the failure path. Paths that
    were never created are ignored.

    Usage
    -----
        with IntermediateFiles() as tmp:
            bed = tmp.add(prefixed_path(prefix, "_ltreg.bed"))
            ...
    """

    def __init__(self) -> None:
        self._paths: List[Path] = []

    def add(self, path: str | Path) -> Path:
        p = Path(path)
        self._paths.append(p)
        return p

    def release(self, path: str | Path) -> None:
        """Stop tracking `path` so it survives cleanup."""
        p = Path(path)
        self._paths = [q for q in self._paths if q != p]

    def cleanup(self) -> None:
        for p in self._paths:
            if p.exists():
                log.debug("removing intermediate %s", p)
                p.unlink()
        self._paths = []

    def __enter__(self) -> "IntermediateFiles":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


@contextmanager
def timed(msg: str) -> Iterator[None]:
    log.info("%s...", msg)
    t0 = time.perf_counter()
    try:
        yield
    finally:
        log.debug("%s took %.1fs", msg, time.perf_counter() - t0)
