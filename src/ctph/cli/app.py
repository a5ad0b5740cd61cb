# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from pathlib import Path
from typing import Iterator, List, Optional
import logging

import typer

from ..ports.filesystem import FilesystemPort
from ..ports.similarity import FuzzyHasherPort
from ..domain.errors import CtphError, SignatureFormatError
from ..domain.signature import Signature

from ..services import ScanService, SimilarityService, ReportService
from ..adapters.index.sqlite_index import SQLiteIndex
from ..adapters.similarity.spamsum_adapter import SpamSumAdapter
from ..adapters.similarity import ssdeep_adapter

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="ctph CLI - context-triggered piecewise (ssdeep) hashing")

BACKENDS: set[str] = {"spamsum", "ssdeep"}

logger = logging.getLogger(__name__)


def _backend(name: Optional[str]) -> FuzzyHasherPort:
    """
    Resolve --backend into a hasher.
    Raises Typer BadParameter for unknown or unavailable backends.
    """
    name = (name or "spamsum").strip().lower()
    if name not in BACKENDS:
        raise typer.BadParameter(
            f"Unknown backend: {name}. Valid options: {', '.join(sorted(BACKENDS))}"
        )
    if name == "ssdeep":
        if not ssdeep_adapter.available():
            raise typer.BadParameter("ssdeep backend requested but the ssdeep module is not installed")
        return ssdeep_adapter.SsdeepAdapter()
    return SpamSumAdapter()


def _check_threshold(threshold: int) -> int:
    if not 0 <= threshold <= 100:
        raise typer.BadParameter("--threshold must be within 0..100")
    return threshold


class LocalFS(FilesystemPort):
    """Minimal local filesystem adapter."""

    def walk(self, root: Path) -> Iterator[Path]:
        root = Path(root)
        if root.is_file():
            yield root
            return
        for dirpath, _dirnames, filenames in os.walk(root):
            d = Path(dirpath)
            for name in sorted(filenames):
                p = d / name
                if p.is_file():
                    yield p

    def stat(self, path: Path) -> dict:
        st = path.stat()
        return {
            "path": str(path),
            "size": st.st_size,
            "mtime_ns": getattr(st, "st_mtime_ns", int(st.st_mtime * 1e9)),
        }


def _signature_for(value: str, hasher: FuzzyHasherPort) -> Signature:
    """An existing file is hashed; anything else must be signature text."""
    p = Path(value)
    if p.is_file():
        try:
            with open(p, "rb") as fh:
                sig = hasher.hash_stream(fh)
        except (OSError, CtphError) as e:
            raise typer.BadParameter(f"cannot hash {p}: {e}")
        if sig is None:
            raise typer.BadParameter(f"{hasher.name()} could not hash {p}")
        return sig
    try:
        return Signature.parse(value)
    except SignatureFormatError as e:
        raise typer.BadParameter(f"{value!r} is neither a file nor a signature: {e}")


# ------------------------------
# CLI Commands
# ------------------------------


@app.command("hash")
def hash_files(
    paths: List[Path] = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Files to hash",
    ),
    backend: str = typer.Option("spamsum", "--backend", help="spamsum or ssdeep"),
    bare: bool = typer.Option(False, "--bare", help="Print signatures without file names."),
):
    """
    Print the fuzzy hash of each file, ssdeep style: `sig,"path"`.
    """
    hasher = _backend(backend)
    failed = 0
    for p in paths:
        try:
            with open(p, "rb") as fh:
                sig = hasher.hash_stream(fh)
        except (OSError, CtphError) as e:
            logger.error("Cannot hash %s: %s", p, e)
            failed += 1
            continue
        if sig is None:
            logger.error("%s produced no signature for %s", hasher.name(), p)
            failed += 1
            continue
        typer.echo(str(sig) if bare else f'{sig},"{p}"')
    if failed:
        raise typer.Exit(code=1)


@app.command()
def compare(
    first: str = typer.Argument(..., help="Signature text or file path"),
    second: str = typer.Argument(..., help="Signature text or file path"),
    backend: str = typer.Option("spamsum", "--backend", help="spamsum or ssdeep"),
):
    """
    Print the 0-100 similarity score of two signatures or files.
    """
    hasher = _backend(backend)
    a = _signature_for(first, hasher)
    b = _signature_for(second, hasher)
    score = hasher.compare(a, b)
    logger.debug("compare %s ~ %s -> %d", a, b, score)
    typer.echo(str(score))


@app.command()
def scan(
    path: Path = typer.Option(
        ...,
        "--path",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to scan",
    ),
    db: Path = typer.Option(
        "ctph.db",
        "--db",
        envvar="CTPH_DB",
        help="Path to SQLite DB file",
        resolve_path=True,
    ),
    backend: str = typer.Option("spamsum", "--backend", help="spamsum or ssdeep"),
    ignore: Optional[List[str]] = typer.Option(
        None, "--ignore", help="Glob pattern to skip (repeatable)"
    ),
    progress: Optional[int] = typer.Option(
        None,
        "--progress",
        min=0,
        help="Log a progress tick every N files (e.g., 100). Omit to disable.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress the final summary line.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Scan a directory, fuzzy hash every file and store the signatures.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    hasher = _backend(backend)
    with SQLiteIndex(db) as index:
        scan_service = ScanService(
            LocalFS(),
            hasher,
            index,
            ignore_patterns=ignore,
            progress_every=progress or 0,
        )
        count = scan_service.scan(Path(path))

    if not quiet:
        typer.echo(f"Scanned {path}; hashed {count} files; index: {db}")


@app.command()
def report(
    db: Path = typer.Option(
        "ctph.db",
        "--db",
        envvar="CTPH_DB",
        help="Path to the SQLite index file.",
        resolve_path=True,
    ),
    fmt: str = typer.Option(
        "json",
        "--fmt",
        help="Output format: json, ndjson or csv.",
        case_sensitive=False,
    ),
    threshold: int = typer.Option(
        50, "--threshold", help="Minimum similarity score (0-100) to report."
    ),
    backend: str = typer.Option("spamsum", "--backend", help="spamsum or ssdeep"),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "--output",
        help="Write report to this path. If a directory is provided, the file will be named 'similar.<fmt>' inside it. "
        "If omitted entirely, defaults to './similar.<fmt>'.",
        resolve_path=True,
    ),
):
    """
    Generate a near-duplicate report from the index.
    """
    _check_threshold(threshold)
    fmt = fmt.lower()
    if fmt not in ("json", "ndjson", "csv"):
        raise typer.BadParameter(f"Unsupported format: {fmt}")
    hasher = _backend(backend)

    with SQLiteIndex(db) as index:
        report_service = ReportService(SimilarityService(index, hasher))

        # no --out -> ./similar.<fmt>; --out DIR -> DIR/similar.<fmt>; --out FILE -> FILE
        if out is None:
            target = Path(f"similar.{fmt}")
        else:
            out = Path(out)
            target = out / f"similar.{fmt}" if out.is_dir() else out

        written = report_service.write_similar(target, fmt=fmt, threshold=threshold)
        typer.echo(f"Wrote {fmt} report to {written}")
