"""Chrome DevTools Protocol session handling."""

from .session_pool import CDPSessionPool

__all__ = ["CDPSessionPool"]
