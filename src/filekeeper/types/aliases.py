"""Type aliases using modern PEP 695 syntax."""

import os

# Anything accepted as a filesystem location; normalised to pathlib.Path
# at each public entry point
type PathLike = str | os.PathLike[str]
