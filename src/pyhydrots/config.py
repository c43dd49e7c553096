"""
Program configuration for applications built on pyhydrots.

:class:`ProgramConfig` carries the program name, version, working directory
and command line.  It is passed explicitly to the code that needs it, such
as :func:`format_output_header`.
"""

from __future__ import annotations

import os
import platform
from datetime import datetime

from pydantic import BaseModel, Field

from pyhydrots.core.properties import PropList

_URL_PREFIXES = ("http:", "https:", "ftp:", "file:")


class ProgramConfig(BaseModel):
    """Settings describing the running program."""

    program_name: str = Field(default="", description="Program name")
    program_version: str = Field(default="", description="Program version")
    working_dir: str = Field(default="", description="Directory for relative paths")
    arguments: list[str] = Field(default_factory=list, description="Command line arguments")
    user: str = Field(default="", description="User running the program")

    model_config = {"extra": "forbid"}

    @classmethod
    def from_prop_list(cls, props: PropList) -> ProgramConfig:
        """
        Build a configuration from a property list.

        Reads ``ProgramName``, ``ProgramVersion``, ``WorkingDir`` and
        ``User``, ignoring case; missing keys keep their defaults.
        """
        values = {}
        for key, field_name in (
            ("ProgramName", "program_name"),
            ("ProgramVersion", "program_version"),
            ("WorkingDir", "working_dir"),
            ("User", "user"),
        ):
            value = props.get_value(key)
            if value is not None:
                values[field_name] = value
        return cls(**values)

    @property
    def command_line(self) -> str:
        """Program name followed by its arguments."""
        return " ".join([self.program_name, *self.arguments]).strip()

    def get_path_using_working_dir(self, path: str) -> str:
        """
        Resolve a path against the working directory.

        Empty paths, URLs and absolute paths are returned unchanged, as are
        all paths when the working directory is empty or ``"."``.
        """
        if not path:
            return path
        if path.lower().startswith(_URL_PREFIXES):
            return path
        if os.path.isabs(path):
            return path
        if self.working_dir in ("", "."):
            return path
        return os.path.normpath(os.path.join(self.working_dir, path))


def format_output_header(
    config: ProgramConfig,
    comments: list[str] | None = None,
    comment: str = "#",
    now: datetime | None = None,
) -> list[str]:
    """
    Build the header lines written at the top of generated files.

    Args:
        config: Program configuration
        comments: Extra lines appended after the standard lines
        comment: Prefix for every line
        now: Creation time (default: current time)

    Returns:
        Header lines without line terminators
    """
    created = now or datetime.now()
    program = f"{config.program_name} {config.program_version}".strip()
    user = config.user or os.environ.get("USER", "unknown")
    working_dir = config.working_dir or os.getcwd()

    lines = [
        f"{comment}",
        f"{comment} File generated by...",
        f"{comment} program:      {program}",
        f"{comment} user:         {user}",
        f"{comment} date:         {created.isoformat(sep=' ', timespec='seconds')}",
        f"{comment} host:         {platform.node()}",
        f"{comment} directory:    {working_dir}",
        f"{comment} command line: {config.command_line}",
    ]
    if comments:
        lines.append(f"{comment}")
        lines.extend(f"{comment} {line}" for line in comments)
    lines.append(f"{comment}")
    return lines
