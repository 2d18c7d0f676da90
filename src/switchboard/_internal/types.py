"""Shared type aliases used across switchboard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler, called as handler(request, respond); may be sync or async
Handler: TypeAlias = Callable[..., Any]
