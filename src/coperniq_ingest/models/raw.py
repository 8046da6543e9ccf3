"""Raw row representation before mapping."""

from typing import Mapping

# One CSV data line keyed by header column. Every cell is a string.
RawRow = Mapping[str, str]
