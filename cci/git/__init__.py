"""Git operations used by the pipeline."""

from cci.git.repository import Repository

__all__ = ["Repository"]
