"""Exit-code contract for the CLI.

Code  Meaning
----  -------
  0   Success: every project was analyzed
  2   Error: usage error, invalid path, plugin load failure, or a project
      whose analysis failed
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 2
