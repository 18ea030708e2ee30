"""Browser-side DOM helpers."""

from .scripts import DOM_SCRIPTS

__all__ = ["DOM_SCRIPTS"]
