"""Developer tooling for mapped names."""

from .inspect_name import main as inspect_main

__all__ = ["inspect_main"]
