from fastapi import FastAPI, Header
from pydantic import BaseModel
from typing import Optional
from models import ApiOk, ReturnStatement, Node, to_i32
from errors import EvalError
from config import lifespan
import logging

logger = logging.getLogger(__name__)

app = FastAPI(title="eval-svc", lifespan=lifespan)

@app.get("/healthz")
def healthz():
    return {"ok": True}

def div(a: int, b: int) -> int:
    if b == 0:
        raise EvalError("E_EVAL_DIV_ZERO", "division by zero")
    q = abs(a) // abs(b)
    return to_i32(q if (a < 0) == (b < 0) else -q)

OPS = {
    "+": lambda a, b: to_i32(a + b),
    "-": lambda a, b: to_i32(a - b),
    "*": lambda a, b: to_i32(a * b),
    "/": div,
}

def evaluate(n: Node) -> int:
    """Reduce a tree to an i32. Identifiers always read as 0; there is no
    environment, so assignment yields its value without binding the name.

    Walks with an explicit stack so operator chains of any length fit.
    """
    values = []
    stack = [(n, False)]
    while stack:
        node, ready = stack.pop()
        t = node.type
        if t == "Int": values.append(node.value)
        elif t == "Ident": values.append(0)
        elif t in ("Assign", "Return"): stack.append((node.value, False))
        elif t == "BinOp":
            if ready:
                right = values.pop()
                left = values.pop()
                values.append(OPS[node.op](left, right))
            else:
                # left is popped, and so evaluated, before right
                stack += [(node, True), (node.right, False), (node.left, False)]
        else: raise ValueError(f"Unknown node {t}")
    return values.pop()

def run(tree: ReturnStatement) -> int:
    if not isinstance(tree, ReturnStatement):
        raise EvalError("E_EVAL_ENTRY", f"expected a return statement, got {tree.type}")
    return evaluate(tree)

class EvalReq(BaseModel):
    ast: ReturnStatement

@app.post("/eval")
def eval_api(req: EvalReq, x_request_id: Optional[str] = Header(None)):
    try:
        value = run(req.ast)
        logger.debug("evaluated to %d (request %s)", value, x_request_id)
        return ApiOk(data={"value": value})
    except EvalError as e:
        logger.info("evaluation failed (request %s): %s", x_request_id, e)
        return e.to_api()
