import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Response, UploadFile
from pydantic import ValidationError

from .config import Settings, get_settings
from .detect import detect_delimiter
from .encoding import decode_upload
from .models import (
    ConvertOptions,
    ConvertResponse,
    ConvertTextRequest,
    DetectRequest,
    DetectResponse,
    HealthResponse,
)
from .pipeline import convert_text
from .rules import DETECT_SAMPLE_CHARS
from .serialize import conversion_payload

logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="csv-json-tool",
    description="Delimited text to JSON records, with embedded JSON and DynamoDB AttributeValue decoding",
    version="0.1.0",
)


def _respond(response: Response, payload: dict) -> dict:
    if not payload["ok"]:
        response.status_code = 500
    return payload


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/detect", response_model=DetectResponse)
def detect(request: DetectRequest):
    return {"delimiter": detect_delimiter(request.text[:DETECT_SAMPLE_CHARS])}


@app.post("/convert/text", response_model=ConvertResponse)
def convert_text_body(
    request: ConvertTextRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
):
    outcome = convert_text(request.text, request.options, settings.json_indent)
    return _respond(response, conversion_payload(outcome, request.options))


@app.post("/convert", response_model=ConvertResponse)
async def convert_upload(
    response: Response,
    file: UploadFile = File(...),
    delimiter: Optional[str] = Form(None),
    auto_detect: Optional[bool] = Form(None),
    parse_embedded: bool = Form(True),
    unmarshal: bool = Form(True),
    infer: bool = Form(True),
    settings: Settings = Depends(get_settings),
):
    filename = (file.filename or "").lower()
    if not filename.endswith(tuple(settings.accepted_extensions)):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    try:
        options = ConvertOptions(
            delimiter=delimiter,
            auto_detect=auto_detect,
            parse_embedded=parse_embedded,
            unmarshal=unmarshal,
            infer=infer,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=[e["msg"] for e in exc.errors()])

    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Upload exceeds the configured size limit")

    text, encoding = decode_upload(raw)
    logger.info("converting upload %s (%d bytes, %s)", file.filename, len(raw), encoding.decode_used)

    outcome = convert_text(text, options, settings.json_indent)
    return _respond(response, conversion_payload(outcome, options, encoding))
