from fastapi import FastAPI, Header
from pydantic import BaseModel, field_validator
from typing import List, Optional
from models import (
    Token, EOF, ApiOk, ApiErr, children,
    NumberLiteral, IdentifierRef, Assignment, BinaryOp, ReturnStatement,
)
from errors import ParseError
from config import EVAL_URL, HTTP_TIMEOUT, lifespan
import logging, requests

logger = logging.getLogger(__name__)

app = FastAPI(title="parser-svc", lifespan=lifespan)

@app.get("/healthz")
def healthz():
    return {"ok": True}

class Parser:
    """Recursive descent over a buffered token list, one token of lookahead.

        return_stmt := 'return' expression ';'
        expression  := term
        term        := factor (('+' | '-') factor)*
        factor      := primary (('*' | '/') primary)*
        primary     := NUMBER | IDENT ('=' expression)? | '(' expression ')'

    Every failure raises ParseError carrying the offending token's position;
    nothing is recovered and no partial tree escapes.
    """

    def __init__(self, tokens: List[Token]):
        self.t = list(tokens)
        if not self.t or self.t[-1].kind != "EOF":
            self.t.append(EOF)
        self.i = 0

    def peek(self) -> Token:
        return self.t[self.i]

    def pop(self) -> Token:
        x = self.peek()
        self.i += self.i < len(self.t) - 1  # stay parked on EOF
        return x

    def match(self, kind, *lexemes) -> Optional[Token]:
        tok = self.peek()
        if tok.kind == kind and (not lexemes or tok.lexeme in lexemes):
            return self.pop()
        return None

    def expect(self, kind, lexeme, code="E_PARSE_EXPECT") -> Token:
        tok = self.match(kind, lexeme)
        if tok is None:
            raise ParseError.at(self.peek(), code, f"expected '{lexeme}', found {self.peek().describe()}")
        return tok

    # grammar
    def parse_return(self) -> ReturnStatement:
        self.expect("KEYWORD", "return")
        value = self.parse_expression()
        self.expect("SYMBOL", ";")
        return ReturnStatement(value=value)

    def parse_expression(self):
        return self.term()

    def term(self):
        left = self.factor()
        while True:
            op = self.match("SYMBOL", "+", "-")
            if op is None:
                return left
            left = BinaryOp(op=op.lexeme, left=left, right=self.factor())

    def factor(self):
        left = self.primary()
        while True:
            op = self.match("SYMBOL", "*", "/")
            if op is None:
                return left
            left = BinaryOp(op=op.lexeme, left=left, right=self.primary())

    def primary(self):
        tok = self.peek()
        if tok.kind == "NUMBER":
            self.pop()
            return NumberLiteral(value=tok.value)
        if tok.kind == "IDENT":
            self.pop()
            if self.match("SYMBOL", "="):
                return Assignment(name=tok.lexeme, value=self.parse_expression())
            return IdentifierRef(name=tok.lexeme)
        if self.match("SYMBOL", "("):
            e = self.parse_expression()
            self.expect("SYMBOL", ")")
            return e
        raise ParseError.at(tok, "E_PARSE_PRIMARY", f"expected expression, found {tok.describe()}")

    def parse_program(self) -> ReturnStatement:
        """A whole source unit: one return statement and nothing after it."""
        stmt = self.parse_return()
        tok = self.peek()
        if tok.kind != "EOF":
            raise ParseError.at(tok, "E_PARSE_TRAILING", f"expected end of input, found {tok.describe()}")
        return stmt

def parse(tokens: List[Token]) -> ReturnStatement:
    p = Parser(tokens)
    try:
        return p.parse_program()
    except RecursionError:
        raise ParseError.at(p.peek(), "E_PARSE_DEPTH", "expression nested too deeply") from None

# trees travel as nested JSON; keep them shallow enough for every hop to decode
MAX_WIRE_DEPTH = 100

def dump_tree(ast: ReturnStatement) -> dict:
    stack = [(ast, 1)]
    while stack:
        node, depth = stack.pop()
        if depth > MAX_WIRE_DEPTH:
            raise ParseError("E_PARSE_DEPTH", f"expression too deep to send (over {MAX_WIRE_DEPTH} levels)")
        stack.extend((c, depth + 1) for c in children(node))
    return ast.model_dump()

class ParseReq(BaseModel):
    tokens: List[Token]

    @field_validator("tokens")
    @classmethod
    def eof_only_last(cls, toks):
        if any(t.kind == "EOF" for t in toks[:-1]):
            raise ValueError("EOF may only be the last token")
        return toks

@app.post("/parse")
def parse_api(req: ParseReq, x_request_id: Optional[str] = Header(None)):
    try:
        ast = parse(req.tokens)
        return ApiOk(data=dump_tree(ast))
    except ParseError as e:
        logger.info("parse failed (request %s): %s", x_request_id, e)
        return e.to_api()

@app.post("/run")
def run_api(req: ParseReq, x_request_id: Optional[str] = Header(None)):
    try:
        ast = parse(req.tokens)

        # forward AST to the evaluator
        hdr = {"X-Request-Id": x_request_id} if x_request_id else {}
        r = requests.post(f"{EVAL_URL}/eval", json={"ast": dump_tree(ast)}, headers=hdr, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
        # evaluator answers with an ApiOk/ApiErr envelope already
        return r.json()

    except ParseError as e:
        logger.info("parse failed (request %s): %s", x_request_id, e)
        return e.to_api()
    except requests.RequestException as e:
        logger.warning("evaluator unreachable (request %s): %s", x_request_id, e)
        return ApiErr(phase="parse", line=None, col=None, code="E_FORWARD_EVAL",
                    msg=f"Failed to contact evaluator: {e}")
