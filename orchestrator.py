from fastapi import FastAPI
from pydantic import BaseModel
from config import LEX_URL, PARSE_URL, HTTP_TIMEOUT, lifespan
import httpx, logging, uuid

logger = logging.getLogger(__name__)

app = FastAPI(title="gateway", lifespan=lifespan)

@app.get("/healthz")
def healthz():
    return {"ok": True}

class RunReq(BaseModel):
    source: str

@app.post("/run")
async def run(req: RunReq):
    rid = str(uuid.uuid4())
    hdr = {"X-Request-Id": rid}
    logger.debug("run %s: %d chars", rid, len(req.source))

    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as c:
        # Step 1: Lexical analysis (never fails, but relay any error envelope)
        lex = (await c.post(LEX_URL, json={"source": req.source}, headers=hdr)).json()
        if not lex.get("ok"):
            return lex

        # Step 2: parser parses and forwards the AST to the evaluator
        result = (await c.post(PARSE_URL, json={"tokens": lex["data"]}, headers=hdr)).json()
        if not result.get("ok"):
            logger.info("run %s failed in %s: %s", rid, result.get("phase"), result.get("msg"))
        return result
