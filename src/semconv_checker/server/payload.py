"""
Reads export requests from disk for offline checks.

Supported inputs:

- ``.pb`` / ``.bin``: one binary ``ExportMetricsServiceRequest``.
- anything else: OTLP/JSON, either one JSON document or JSON lines with
  one request per line (the collector file exporter layout).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from google.protobuf import json_format
from google.protobuf.message import DecodeError
from opentelemetry.proto.collector.metrics.v1.metrics_service_pb2 import (
    ExportMetricsServiceRequest,
)

from semconv_checker.errors import PayloadError

logger = logging.getLogger(__name__)

_BINARY_SUFFIXES = (".pb", ".bin")


def _parse_json(text: str, source: str) -> ExportMetricsServiceRequest:
    try:
        return json_format.Parse(
            text, ExportMetricsServiceRequest(), ignore_unknown_fields=True
        )
    except json_format.ParseError as exc:
        raise PayloadError(f"{source}: not an OTLP/JSON metrics request: {exc}") from exc


def load_requests(path: Path) -> list[ExportMetricsServiceRequest]:
    """Decode every export request stored in ``path``.

    Raises:
        FileNotFoundError: If the file does not exist.
        PayloadError: If the content cannot be decoded or holds no request.
    """
    if not path.exists():
        raise FileNotFoundError(f"Payload file not found: {path}")

    if path.suffix in _BINARY_SUFFIXES:
        request = ExportMetricsServiceRequest()
        try:
            request.ParseFromString(path.read_bytes())
        except DecodeError as exc:
            raise PayloadError(f"{path}: not a protobuf metrics request: {exc}") from exc
        return [request]

    text = path.read_text(encoding="utf-8")
    try:
        json.loads(text)
    except json.JSONDecodeError:
        lines = [line for line in text.splitlines() if line.strip()]
        requests = [
            _parse_json(line, f"{path}:{number}")
            for number, line in enumerate(lines, start=1)
        ]
    else:
        requests = [_parse_json(text, str(path))]

    if not requests:
        raise PayloadError(f"{path}: no export requests found")

    logger.debug("Loaded %d export request(s) from %s", len(requests), path)
    return requests
