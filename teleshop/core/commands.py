"""
Button payload vocabulary.

Callback data is decoded once into a ``Command``; strings that do not belong
to the vocabulary (stale buttons, foreign payloads) decode to ``UNKNOWN``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CommandKind(Enum):
    """Kinds of button commands."""
    ROOT = "cmd_start"
    PRODUCTS = "cmd_products"
    SEARCH = "cmd_search"
    CONTACT = "cmd_contact"
    HELP = "cmd_help"
    CANCEL_ORDER = "cmd_cancel_order"
    VIEW_CART = "cart_view"
    CLEAR_CART = "cart_clear"
    CHECKOUT = "cart_checkout"
    OPEN_CATEGORY = "cat"
    OPEN_PRODUCT = "prod"
    ADD_TO_CART = "cart_add"
    REMOVE_FROM_CART = "cart_rm"
    BUY_NOW = "order"
    UNKNOWN = "unknown"


# Commands without arguments, matched on the whole payload
_PLAIN = {
    kind.value: kind
    for kind in (
        CommandKind.ROOT,
        CommandKind.PRODUCTS,
        CommandKind.SEARCH,
        CommandKind.CONTACT,
        CommandKind.HELP,
        CommandKind.CANCEL_ORDER,
        CommandKind.VIEW_CART,
        CommandKind.CLEAR_CART,
        CommandKind.CHECKOUT,
    )
}

# Prefixed commands; longest prefix first so "cart_add_" wins over shorter ones
_PREFIXED = (
    (CommandKind.ADD_TO_CART, 1),
    (CommandKind.REMOVE_FROM_CART, 1),
    (CommandKind.OPEN_CATEGORY, 1),
    (CommandKind.OPEN_PRODUCT, 2),
    (CommandKind.BUY_NOW, 1),
)

MAX_CALLBACK_DATA = 64


@dataclass(frozen=True)
class Command:
    """Decoded button command."""
    kind: CommandKind
    arg: Optional[str] = None
    context: Optional[str] = None
    raw: str = ""

    @classmethod
    def decode(cls, data: Optional[str]) -> "Command":
        """Decode callback data. Never raises."""
        if not data:
            return cls(CommandKind.UNKNOWN, raw=data or "")

        if data in _PLAIN:
            return cls(_PLAIN[data], raw=data)

        for kind, arity in _PREFIXED:
            prefix = f"{kind.value}_"
            if not data.startswith(prefix):
                continue
            rest = data[len(prefix):]
            if not rest:
                break
            # Product ids are "_"-free; the optional second part is the parent category
            parts = rest.split("_", 1) if arity == 2 else [rest]
            if not parts[0]:
                break
            context = parts[1] if len(parts) > 1 and parts[1] else None
            return cls(kind, arg=parts[0], context=context, raw=data)

        return cls(CommandKind.UNKNOWN, raw=data)

    def encode(self) -> str:
        """Encode to callback data."""
        if self.kind is CommandKind.UNKNOWN:
            raise ValueError("UNKNOWN command cannot be encoded")
        if self.arg is None:
            data = self.kind.value
        elif self.context:
            data = f"{self.kind.value}_{self.arg}_{self.context}"
        else:
            data = f"{self.kind.value}_{self.arg}"
        if len(data.encode()) > MAX_CALLBACK_DATA:
            raise ValueError(f"Callback data too long: {data!r}")
        return data


def callback(kind: CommandKind, arg: Optional[str] = None, context: Optional[str] = None) -> str:
    """Shortcut to build callback data."""
    return Command(kind, arg=arg, context=context).encode()
