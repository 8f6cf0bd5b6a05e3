"""Allow ``python -m bumpbot``."""

from .bot import run

run()
