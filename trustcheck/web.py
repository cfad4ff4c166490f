import logging

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from trustcheck.analyzers.domain_analyzer import analyze_domain
from trustcheck.checks.types import RequestType
from trustcheck.config import configure_logging
from trustcheck.errors import InvalidRequestError

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Crypto Trust Check API", version="1.0.0")


class ValidateRequest(BaseModel):
    domain: str
    type: RequestType = RequestType.GENERAL


def _validate(domain: str, request_type: str):
    try:
        return analyze_domain(domain, request_type)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Validation of %r failed", domain)
        raise HTTPException(status_code=500, detail=str(e))


# ----------------------------------------------------
# Routes
# ----------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/v1/validate")
def validate(body: ValidateRequest):
    return _validate(body.domain, body.type.value)


@app.get("/api/v1/validate/{domain}")
def validate_domain(domain: str, type: RequestType = Query(RequestType.GENERAL, description="general or crypto")):
    return _validate(domain, type.value)
