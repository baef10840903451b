from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class ConvertOptions(BaseModel):
    """
    Conversion switches.

    Either an explicit ``delimiter`` or ``auto_detect`` is used, never both.
    When ``auto_detect`` is left out it is on unless a delimiter is given.
    """

    delimiter: Optional[str] = Field(default=None, examples=[","])
    auto_detect: Optional[bool] = None
    parse_embedded: bool = True
    unmarshal: bool = True
    infer: bool = True

    @model_validator(mode="before")
    @classmethod
    def _default_auto_detect(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("auto_detect") is None:
            data = {**data, "auto_detect": data.get("delimiter") in (None, "")}
        return data

    @field_validator("delimiter", mode="before")
    @classmethod
    def _unescape_tab(cls, v):
        if v == "":
            return None
        # form fields and query strings usually carry a tab as backslash-t
        if v == "\\t":
            return "\t"
        return v

    @model_validator(mode="after")
    def _delimiter_xor_auto_detect(self) -> "ConvertOptions":
        if self.auto_detect and self.delimiter is not None:
            raise ValueError("delimiter and auto_detect are mutually exclusive")
        if not self.auto_detect and self.delimiter is None:
            raise ValueError("delimiter is required when auto_detect is off")
        if self.delimiter is not None and len(self.delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        return self


class ConvertTextRequest(BaseModel):
    text: str
    options: ConvertOptions = Field(default_factory=ConvertOptions)


class DetectRequest(BaseModel):
    text: str


class DetectResponse(BaseModel):
    delimiter: str


class RenderedJson(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content: str


class EncodingReport(BaseModel):
    detected: Optional[str] = None
    decode_used: str
    decode_fallback: bool = False


class ReportSummary(BaseModel):
    rows: int = 0
    columns: int = 0
    records: int = 0
    dropped_rows: int = 0


class ConversionReport(BaseModel):
    status: str
    delimiter: Optional[str] = None
    auto_detected: bool = False
    summary: ReportSummary = Field(default_factory=ReportSummary)
    options: ConvertOptions
    encoding: Optional[EncodingReport] = None


class ConvertResponse(BaseModel):
    ok: bool
    records: List[Dict[str, Any]] = Field(default_factory=list)
    output: Optional[RenderedJson] = None
    report: ConversionReport


class HealthResponse(BaseModel):
    ok: bool = True
