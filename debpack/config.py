"""Run configuration — one immutable value threaded through the pipeline."""

from __future__ import annotations

import getpass
import os
import socket
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

SOURCE_LOCAL = "local"
SOURCE_GIT = "git"
SOURCE_SVN = "svn"
SOURCE_MODES = (SOURCE_LOCAL, SOURCE_GIT, SOURCE_SVN)


def default_maintainer() -> tuple[str, str]:
    """Maintainer identity from DEBFULLNAME / DEBEMAIL.

    DEBEMAIL may also carry the name (``Jane Doe <jane@example.org>``).
    Falls back to the login name at the local host name.
    """
    name = os.environ.get("DEBFULLNAME", "").strip()
    email = os.environ.get("DEBEMAIL", "").strip() or os.environ.get("EMAIL", "").strip()
    if "<" in email and email.endswith(">"):
        embedded_name, _, address = email[:-1].partition("<")
        name = name or embedded_name.strip()
        email = address.strip()
    user = getpass.getuser()
    return (name or user, email or f"{user}@{socket.getfqdn()}")


@dataclass(frozen=True)
class RunConfig:
    """Options for one packaging run."""

    source_mode: str = SOURCE_LOCAL  # "local" | "git" | "svn"
    source: str = "."  # path for local mode, URL otherwise
    revision: str | None = None  # branch/tag/commit for git, revision for svn
    output_dir: Path = Path(".")
    strict: bool = False
    run_tests: bool = True
    cleanup: bool = True
    build: bool = True
    language: str = "perl"
    maintainer_name: str = "debpack"
    maintainer_email: str = "debpack@localhost"
    timestamp: datetime | None = None  # changelog date; now() when None

    def __post_init__(self) -> None:
        if self.source_mode not in SOURCE_MODES:
            raise ValueError(f"Unknown source mode '{self.source_mode}'")
        object.__setattr__(self, "output_dir", Path(self.output_dir))

    @property
    def is_local(self) -> bool:
        return self.source_mode == SOURCE_LOCAL

    @classmethod
    def from_env(cls, **overrides) -> RunConfig:
        """Build a config with the maintainer identity taken from the environment."""
        name, email = default_maintainer()
        values = {"maintainer_name": name, "maintainer_email": email}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
