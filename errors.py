from typing import Optional
from models import ApiErr, Token

class CompileError(Exception):
    """A terminal pipeline failure, reported to callers as an ApiErr envelope."""
    phase = "parse"

    def __init__(self, code: str, msg: str, line: Optional[int] = None, col: Optional[int] = None):
        self.code = code
        self.line = line
        self.col = col
        super().__init__(msg)
        self.msg = msg

    def __str__(self):
        if self.line is None:
            return self.msg
        return f"{self.msg} at line {self.line}, col {self.col}"

    def to_api(self) -> ApiErr:
        return ApiErr(phase=self.phase, line=self.line, col=self.col, code=self.code, msg=self.msg)

class ParseError(CompileError, SyntaxError):
    phase = "parse"

    @classmethod
    def at(cls, tok: Token, code: str, msg: str) -> "ParseError":
        if tok.pos is None:
            return cls(code, msg)
        return cls(code, msg, tok.pos.line, tok.pos.column)

class EvalError(CompileError, ArithmeticError):
    phase = "eval"
