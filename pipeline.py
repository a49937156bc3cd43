"""In-process text -> tokens -> AST -> int, without the HTTP hops."""
from models import ReturnStatement
from lexer import tokenize
from parser import parse as parse_tokens
from evaluator import run as run_tree

def parse(source: str) -> ReturnStatement:
    return parse_tokens(tokenize(source))

def run(source: str) -> int:
    """Raises ParseError or EvalError; both carry the message shown to users."""
    return run_tree(parse(source))
