"""
REST API for the DLMS APDU inspector
FastAPI front-end over DlmsParser
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, field_validator

from . import __version__
from .config import settings
from .export import ViewFormat, export
from .hex_utils import normalize_hex
from .models import ParseSuccess, result_to_dict
from .octet_string import analyze_octet_string
from .parser import DlmsParser

logger = logging.getLogger(__name__)

app = FastAPI(
    title="DLMS APDU Inspector API",
    description="Decode hex-encoded DLMS/COSEM APDUs into typed messages",
    version=__version__,
)


@lru_cache(maxsize=1)
def get_parser() -> DlmsParser:
    return DlmsParser()


# Pydantic models for API

class HexRequest(BaseModel):
    hex: str = Field(..., description="APDU as hex, optionally space separated")


class BatchRequest(BaseModel):
    items: List[str] = Field(..., description="One hex APDU per item")

    @field_validator("items")
    @classmethod
    def _limit_batch(cls, items: List[str]) -> List[str]:
        if len(items) > settings.MAX_BATCH_SIZE:
            raise ValueError(f"at most {settings.MAX_BATCH_SIZE} items per batch")
        return items


class ValidateResponse(BaseModel):
    valid: bool
    normalized: str


@app.on_event("startup")
async def startup_event():
    logger.info(f"DLMS APDU Inspector API {__version__} ready")


# API Endpoints

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "DLMS APDU Inspector API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/validate", response_model=ValidateResponse)
async def validate(request: HexRequest, parser: DlmsParser = Depends(get_parser)):
    """Check the hex format without decoding"""
    return ValidateResponse(
        valid=parser.validate_hex(request.hex),
        normalized=normalize_hex(request.hex),
    )


@app.post("/parse")
def parse(request: HexRequest, parser: DlmsParser = Depends(get_parser)) -> Dict[str, Any]:
    """Parse one APDU; failures are returned as {ok: false, message}"""
    return result_to_dict(parser.parse_hex(request.hex))


@app.post("/parse/batch")
def parse_batch(request: BatchRequest, parser: DlmsParser = Depends(get_parser)) -> Dict[str, Any]:
    """Parse several APDUs; the batch fails if any item fails"""
    return result_to_dict(parser.parse_many(request.items))


@app.post("/analyze/octet-string")
async def analyze(request: HexRequest) -> Dict[str, Any]:
    """Guess the meaning of an opaque OctetString value"""
    clean = normalize_hex(request.hex)
    return analyze_octet_string(clean).model_dump(mode="json", by_alias=True)


@app.post("/export", response_class=PlainTextResponse)
def export_messages(
    request: BatchRequest,
    format: ViewFormat = Query(ViewFormat.JSON),
    parser: DlmsParser = Depends(get_parser),
) -> str:
    """Parse the batch and render it as a JSON or XML document"""
    parsed = parser.parse_many(request.items)
    if not isinstance(parsed, ParseSuccess):
        raise HTTPException(status_code=400, detail=parsed.message)

    rendered = export(parsed.data, format)
    if not isinstance(rendered, ParseSuccess):
        raise HTTPException(status_code=500, detail=rendered.message)
    return rendered.data


def run(host: str = settings.API_HOST, port: int = settings.API_PORT):
    import uvicorn

    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
    )
