"""Built-in action providers."""

from typing import List

from editrecon.actions.builtin.newlines import NewlineProvider
from editrecon.actions.builtin.whitespace import WhitespaceProvider


def builtin_providers(tab_size: int = 4) -> List[object]:
    return [WhitespaceProvider(tab_size=tab_size), NewlineProvider()]


__all__ = ["NewlineProvider", "WhitespaceProvider", "builtin_providers"]
