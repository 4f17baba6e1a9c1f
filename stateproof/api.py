"""
State proof verification service.

    POST /verify   {"transaction_id": "...", "payload": {<state proof bundle>}}
    GET  /health

Undecodable input answers 422. A proof that decodes but does not hold
answers 200 with ``verified: false`` and the error code.
"""

from typing import Any, Dict

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__, config
from .bundle import StateProofDocument
from .errors import FormatError, StateProofError
from .logging_config import configure_logging, set_request_id
from .verifier import StateProofVerifier

app = FastAPI(title="State Proof Verifier", version=__version__)

VERIFIER = StateProofVerifier()


class VerifyRequest(BaseModel):
    transaction_id: str = Field(min_length=1)
    payload: StateProofDocument


@app.on_event("startup")
def _startup():
    configure_logging(
        level=config.effective_log_level(config.LOG_LEVEL),
        json_format=config.LOG_JSON,
        log_file=config.LOG_FILE or None
    )


@app.get("/health")
def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": __version__,
        "env": config.ENV,
        "production": config.is_production(),
    }


@app.post("/verify")
def verify_state_proof(req: VerifyRequest):
    request_id = set_request_id()

    try:
        VERIFIER.verify_document(req.transaction_id, req.payload)
    except FormatError as e:
        return JSONResponse(
            status_code=422,
            content={"verified": False, "request_id": request_id, **e.to_dict()}
        )
    except StateProofError as e:
        return {"verified": False, "request_id": request_id, **e.to_dict()}

    return {"verified": True, "request_id": request_id, "transaction_id": req.transaction_id}
