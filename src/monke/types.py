from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union
from typing_extensions import TypeAlias

from .ast import BlockStatement, Identifier

INT64_MASK = (1 << 64) - 1
INT64_SIGN = 1 << 63

def wrap_int64(value: int) -> int:
    """Reduce an unbounded Python int to signed 64-bit two's complement."""
    value &= INT64_MASK
    return value - (1 << 64) if value & INT64_SIGN else value

# ---------- Value Model ----------

@dataclass(frozen=True)
class MonkeInteger:
    value: int

    def type_name(self) -> str:
        return "INTEGER"

    def inspect(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return self.inspect()

@dataclass(frozen=True, eq=False)
class MonkeBool:
    value: bool

    def type_name(self) -> str:
        return "BOOLEAN"

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def __repr__(self) -> str:
        return self.inspect()

@dataclass(frozen=True, eq=False)
class MonkeNull:
    def type_name(self) -> str:
        return "NULL"

    def inspect(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return self.inspect()

@dataclass(frozen=True)
class MonkeReturn:
    """Carries a `return`ed value up to the nearest call boundary. Never user-visible."""
    value: MonkeValue

    def type_name(self) -> str:
        return "RETURN_VALUE"

    def inspect(self) -> str:
        return self.value.inspect()

@dataclass(frozen=True)
class MonkeError:
    """Evaluation failure; propagates like MonkeReturn until displayed."""
    message: str

    def type_name(self) -> str:
        return "ERROR"

    def inspect(self) -> str:
        return f"ERROR: {self.message}"

    def __repr__(self) -> str:
        return self.inspect()

@dataclass(frozen=True, eq=False)
class MonkeFn:
    params: Tuple[Identifier, ...]
    body: BlockStatement
    frame: 'Frame'  # Closure frame, shared with the defining scope

    def type_name(self) -> str:
        return "FUNCTION"

    def inspect(self) -> str:
        params = ", ".join(p.value for p in self.params)
        return f"fn({params}) {self.body}"

    def __repr__(self) -> str:
        param_desc = ", ".join(p.value for p in self.params) if self.params else "nullary"
        return f"<fn params={param_desc}>"

MonkeValue: TypeAlias = Union[
    MonkeInteger,
    MonkeBool,
    MonkeNull,
    MonkeReturn,
    MonkeError,
    MonkeFn,
]

# Process-wide singletons, compared by identity.
TRUE = MonkeBool(True)
FALSE = MonkeBool(False)
NULL = MonkeNull()

def native_bool(value: bool) -> MonkeBool:
    return TRUE if value else FALSE

# ---------- Environment ----------

class Frame:
    """A lexical scope: insertion-ordered bindings plus an optional enclosing scope.

    Frames are shared by reference. A function value keeps its defining frame
    alive and sees later changes to it; nothing is ever copied.
    """

    def __init__(self, parent: Optional['Frame']=None):
        self.parent = parent
        self.vars: Dict[str, MonkeValue] = {}

    @classmethod
    def enclosed(cls, outer: 'Frame') -> 'Frame':
        return cls(parent=outer)

    def define(self, name: str, val: MonkeValue) -> None:
        """Create or overwrite a binding in this scope only."""
        self.vars[name] = val

    def get(self, name: str) -> Optional[MonkeValue]:
        if name in self.vars:
            return self.vars[name]

        if self.parent is not None:
            return self.parent.get(name)

        return None

    def names(self) -> List[str]:
        """Names visible from this scope, innermost first, without shadowed duplicates."""
        seen: Dict[str, None] = {}
        cur: Optional[Frame] = self

        while cur is not None:
            for name in cur.vars:
                seen.setdefault(name, None)

            cur = cur.parent

        return list(seen)

    def __repr__(self) -> str:
        return f"Frame({list(self.vars)!r}, parent={'yes' if self.parent else 'no'})"

# ---------- Exceptions ----------

class MonkeInternalError(RuntimeError):
    """Interpreter bug: a node kind the evaluator does not know. Unreachable from parsed input."""
