"""cmdlang abstract syntax tree. The node set is closed:

```
Statement  := Assign | Print | Input | If
Expression := BinaryOp | Identifier | NumberLiteral
```

Nodes are immutable and own their children (a strict tree). line/column record where a node starts in the source;
they are ignored when comparing nodes.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple


@dataclass(frozen=True)
class Node:
    line: Optional[int] = field(default=None, compare=False, repr=False, kw_only=True)
    column: Optional[int] = field(default=None, compare=False, repr=False, kw_only=True)

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<field>='<value>', <field>=[
            <Node>(...),
            ...
        ])
        """
        pad = "    " * indents
        attrs = []
        for attr in fields(self):
            if not attr.compare:
                continue
            value = getattr(self, attr.name)
            if isinstance(value, Node):
                attrs.append(f"{attr.name}=\n{value.display(indents + 1)}")
            elif isinstance(value, tuple):
                if value:
                    nodes = ",\n".join(node.display(indents + 1) for node in value)
                    attrs.append(f"{attr.name}=[\n{nodes}\n{pad}]")
                else:
                    attrs.append(f"{attr.name}=[]")
            else:
                attrs.append(f"{attr.name}='{value}'")
        return f"{pad}{type(self).__name__}({', '.join(attrs)})"


class Expression(Node):
    """Evaluates to an integer."""


class Statement(Node):
    """Executed for its effect."""


@dataclass(frozen=True)
class BinaryOp(Expression):
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class NumberLiteral(Expression):
    text: str  # verbatim, e.g. "3.14"


@dataclass(frozen=True)
class Assign(Statement):
    identifier: str
    expr: Expression


@dataclass(frozen=True)
class Print(Statement):
    expr: Expression


@dataclass(frozen=True)
class Input(Statement):
    identifier: str


@dataclass(frozen=True)
class If(Statement):
    condition: Expression
    body: Tuple[Statement, ...]


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...]
