"""Decodes vegeta recordings into request results."""
import csv
import io
import json
import logging
import os
from pathlib import Path
from typing import Iterator, Union

from pydantic import ValidationError

from .exceptions import DecodeError, RecordingIOError
from .models import RequestResult


# Configure logging
logger = logging.getLogger(__name__)

# Column order written by `vegeta encode --to csv`
CSV_FIELDS = (
    "timestamp", "code", "latency", "bytes_out", "bytes_in", "error",
    "body", "attack", "seq", "method", "url",
)
CSV_REQUIRED_FIELDS = 8


class ResultDecoder:
    """Reads one recording file lazily, one RequestResult at a time."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    @property
    def file_size(self) -> int:
        """Size of the recording in bytes."""
        try:
            return self.path.stat().st_size
        except OSError as e:
            raise RecordingIOError(f"{self.path}: {e.strerror or e}") from e

    def results(self) -> Iterator[RequestResult]:
        """
        Yield every result in the recording.

        Yields:
            RequestResult per record, in file order.

        Raises:
            RecordingIOError: If the file cannot be opened or read.
            DecodeError: If a record is malformed or the encoding is unsupported.
        """
        try:
            with open(self.path, 'rb') as f:
                encoding = self._detect_encoding(f)
                if encoding is None:
                    return
                text = io.TextIOWrapper(f, encoding='utf-8', newline='')
                if encoding == 'json':
                    yield from self._decode_json(text)
                else:
                    yield from self._decode_csv(text)
        except OSError as e:
            raise RecordingIOError(f"{self.path}: {e.strerror or e}") from e

    def _detect_encoding(self, f) -> Union[str, None]:
        first = b""
        while not first:
            chunk = f.read(512)
            if not chunk:
                return None
            first = chunk.lstrip()[:1]
        f.seek(0, os.SEEK_SET)
        if first == b'{':
            return 'json'
        if first.isdigit() or first == b'-':
            return 'csv'
        raise DecodeError(
            f"{self.path}: unsupported recording format, convert it with `vegeta encode --to json`",
            str(self.path),
        )

    def _fail(self, record: int, reason: object) -> DecodeError:
        return DecodeError(f"{self.path}: record {record}: {reason}", str(self.path), record)

    def _decode_json(self, text: io.TextIOWrapper) -> Iterator[RequestResult]:
        record = 0
        try:
            for line in text:
                if not line.strip():
                    continue
                record += 1
                try:
                    result = RequestResult.model_validate(json.loads(line))
                except (ValueError, TypeError) as e:
                    raise self._fail(record, e) from e
                yield result
        except UnicodeDecodeError as e:
            raise self._fail(record + 1, e) from e

    def _decode_csv(self, text: io.TextIOWrapper) -> Iterator[RequestResult]:
        record = 0
        try:
            for row in csv.reader(text):
                if not row or not any(cell.strip() for cell in row):
                    continue
                record += 1
                if len(row) < CSV_REQUIRED_FIELDS:
                    raise self._fail(record, f"expected at least {CSV_REQUIRED_FIELDS} fields, got {len(row)}")
                values = dict(zip(CSV_FIELDS, row))
                try:
                    result = RequestResult.model_validate(values)
                except ValidationError as e:
                    raise self._fail(record, e) from e
                yield result
        except (UnicodeDecodeError, csv.Error) as e:
            raise self._fail(record + 1, e) from e

