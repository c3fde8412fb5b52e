"""Single-file documentation aggregate.

``gen-docs`` writes one markdown file per command (``coder.md``,
``coder_envs.md``, ``coder_envs_ls.md``, ...). The aggregate concatenates
them parent-before-child and turns cross-file links into in-page anchors.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from cci.core.result import Err, Ok, Result
from cci.platform.files import FileError, atomic_write_text

__all__ = ["aggregate_docs", "anchor_for", "order_doc_files"]


def _command_path(filename: str) -> tuple[str, ...]:
    return tuple(filename.removesuffix(".md").split("_"))


def order_doc_files(filenames: Iterable[str]) -> list[str]:
    """Depth-first command order: ``coder``, ``coder_envs``, ``coder_envs_ls``, ``coder_urls``."""
    return sorted(filenames, key=_command_path)


def anchor_for(filename: str) -> str:
    """``coder_envs_ls.md`` -> ``#coder-envs-ls``."""
    return "#" + "-".join(_command_path(filename))


def aggregate_docs(docs_dir: Path, aggregate_name: str) -> Result[Path, FileError]:
    """Write ``docs_dir/aggregate_name`` from the other markdown files.

    An existing aggregate is ignored as input and overwritten.
    """
    try:
        names = [
            p.name
            for p in docs_dir.iterdir()
            if p.is_file() and p.suffix == ".md" and p.name != aggregate_name
        ]
    except OSError as e:
        return Err(FileError(message=f"read {docs_dir}: {e}", path=docs_dir))

    if not names:
        return Err(FileError(message=f"no markdown files in {docs_dir}", path=docs_dir))

    parts: list[str] = []
    for name in order_doc_files(names):
        try:
            parts.append("\n" + (docs_dir / name).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            return Err(FileError(message=f"read {name}: {e}", path=docs_dir / name))
    aggregated = "".join(parts)

    # Longest first: a short name can be a suffix of a longer one.
    for name in sorted(names, key=len, reverse=True):
        aggregated = aggregated.replace(name, anchor_for(name))

    out_path = docs_dir / aggregate_name
    try:
        atomic_write_text(out_path, aggregated)
    except OSError as e:
        return Err(FileError(message=f"write {out_path}: {e}", path=out_path))
    return Ok(out_path)
