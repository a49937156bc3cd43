from fastapi import FastAPI, Header
from pydantic import BaseModel
from typing import Iterator, List, Optional
from models import Token, Position, ApiOk, to_i32
from config import lifespan
import logging, re

logger = logging.getLogger(__name__)

app = FastAPI(title="lexer-svc", lifespan=lifespan)

@app.get("/healthz")
def healthz():
    return {"ok": True}

KEYWORDS = frozenset({"int", "return", "if", "else", "while", "for"})

# ASCII only; \d and \w would accept other scripts
NUMBER = re.compile(r"[0-9]+")
WORD = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

def number_value(digits: str) -> int:
    """Accumulate a digit run into an i32, wrapping on overflow."""
    n = 0
    for ch in digits:
        n = (n * 10 + ord(ch) - 48) & 0xFFFFFFFF
    return to_i32(n)

class Lexer:
    """Lazily splits source text into positioned tokens.

    Lines are 1-based, columns 0-based and reset after every newline. The
    lexer is total: any character that is not whitespace, a digit run or a
    word becomes a one-character SYMBOL and is left for the parser to reject.
    """

    def __init__(self, source: str):
        self.s = source
        self.i = 0
        self.line = 1
        self.col = 0

    def skip_whitespace(self):
        while self.i < len(self.s) and self.s[self.i].isspace():
            if self.s[self.i] == "\n":
                self.line += 1; self.col = 0
            else:
                self.col += 1
            self.i += 1

    def next_token(self) -> Token:
        self.skip_whitespace()
        if self.i >= len(self.s):
            return Token(kind="EOF")
        pos = Position(line=self.line, column=self.col)
        m = NUMBER.match(self.s, self.i)
        if m:
            text = self._consume(m.group())
            return Token(kind="NUMBER", lexeme=text, value=number_value(text), pos=pos)
        m = WORD.match(self.s, self.i)
        if m:
            text = self._consume(m.group())
            return Token(kind="KEYWORD" if text in KEYWORDS else "IDENT", lexeme=text, pos=pos)
        return Token(kind="SYMBOL", lexeme=self._consume(self.s[self.i]), pos=pos)

    def _consume(self, text: str) -> str:
        self.i += len(text); self.col += len(text)
        return text

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to, but not including, EOF."""
        while True:
            tok = self.next_token()
            if tok.kind == "EOF":
                return
            yield tok

def tokenize(source: str) -> List[Token]:
    """Buffer the whole token stream; the result always ends with EOF."""
    lx = Lexer(source)
    out = list(lx)
    out.append(lx.next_token())
    return out

class LexReq(BaseModel):
    source: str

@app.post("/lex")
def lex(req: LexReq, x_request_id: Optional[str] = Header(None)):
    toks = tokenize(req.source)
    logger.debug("lexed %d tokens (request %s)", len(toks), x_request_id)
    return ApiOk(data=[t.model_dump() for t in toks])
