from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Annotated, Optional, Any, Literal, Union

I32_BITS = 32

def to_i32(n: int) -> int:
    """Wrap an arbitrary int into the signed 32-bit range (two's complement)."""
    m = 1 << I32_BITS
    n %= m
    return n - m if n >= (m >> 1) else n

I32 = Annotated[int, Field(ge=-(1 << (I32_BITS - 1)), le=(1 << (I32_BITS - 1)) - 1)]

class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

# tokens
class Position(Frozen):
    line: int
    column: int

TokenKind = Literal["NUMBER", "IDENT", "KEYWORD", "SYMBOL", "EOF"]

class Token(Frozen):
    kind: TokenKind
    lexeme: str = ""
    value: Optional[I32] = None
    pos: Optional[Position] = None  # None only for EOF

    @model_validator(mode="after")
    def check_shape(self):
        if self.kind == "NUMBER" and self.value is None:
            raise ValueError("NUMBER token needs a value")
        if self.kind != "EOF" and self.pos is None:
            raise ValueError(f"{self.kind} token needs a position")
        return self

    def describe(self) -> str:
        if self.kind == "EOF": return "end of input"
        if self.kind == "NUMBER": return f"number {self.lexeme}"
        name = {"IDENT": "identifier", "KEYWORD": "keyword", "SYMBOL": "symbol"}[self.kind]
        return f"{name} '{self.lexeme}'"

EOF = Token(kind="EOF")

# AST
Operator = Literal["+", "-", "*", "/"]

class NumberLiteral(Frozen):
    type: Literal["Int"] = "Int"
    value: I32

class IdentifierRef(Frozen):
    type: Literal["Ident"] = "Ident"
    name: str

class Assignment(Frozen):
    type: Literal["Assign"] = "Assign"
    name: str
    value: "Node"

class BinaryOp(Frozen):
    type: Literal["BinOp"] = "BinOp"
    op: Operator
    left: "Node"
    right: "Node"

class ReturnStatement(Frozen):
    type: Literal["Return"] = "Return"
    value: "Node"

Node = Annotated[
    Union[NumberLiteral, IdentifierRef, Assignment, BinaryOp, ReturnStatement],
    Field(discriminator="type"),
]

for _m in (Assignment, BinaryOp, ReturnStatement):
    _m.model_rebuild()

def children(node) -> tuple:
    if node.type == "BinOp": return (node.left, node.right)
    if node.type in ("Assign", "Return"): return (node.value,)
    return ()

# envelopes
Phase = Literal["lex", "parse", "eval"]

class ApiErr(BaseModel):
    ok: Literal[False] = False
    phase: Phase
    line: Optional[int] = None
    col: Optional[int] = None
    code: str
    msg: str

class ApiOk(BaseModel):
    ok: Literal[True] = True
    data: Any
