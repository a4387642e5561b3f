"""
Duo JSON response envelope.

Every Duo API response body has the shape::

    {"stat": "OK", "response": ...}
    {"stat": "FAIL", "code": 40002, "message": "...", "message_detail": "..."}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from duo_http.constants import ResponseStat
from duo_http.core.exceptions import ProtocolError


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    Decoded Duo response.

    Attributes:
        status_code: HTTP status code
        raw_body: Response body text
        parsed_json: Decoded JSON object
        stat: Value of the ``stat`` field (None if absent)
        response: Value of the ``response`` field on success
        error_code: Remote error code (set only when stat is not OK)
        error_message: Remote error message (set only when stat is not OK)
        message_detail: Optional extra detail supplied with failures
    """

    status_code: int
    raw_body: str
    parsed_json: dict[str, Any]
    stat: str | None
    response: Any = None
    error_code: int | None = None
    error_message: str | None = None
    message_detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.stat == ResponseStat.OK

    @classmethod
    def parse(cls, status_code: int, raw_body: str) -> ResponseEnvelope:
        """
        Decode a response body.

        Args:
            status_code: HTTP status code
            raw_body: Response body text

        Returns:
            ResponseEnvelope

        Raises:
            ProtocolError: If the body is not a JSON object
        """
        try:
            data = json.loads(raw_body)
        except ValueError as e:
            raise ProtocolError(
                None,
                f"Response body is not valid JSON: {e}",
                status_code=status_code,
                response_data={"raw": raw_body},
            ) from e

        if not isinstance(data, dict):
            raise ProtocolError(
                None,
                "Response body is not a JSON object",
                status_code=status_code,
                response_data={"raw": raw_body},
            )

        stat = data.get("stat")
        if stat == ResponseStat.OK:
            return cls(
                status_code=status_code,
                raw_body=raw_body,
                parsed_json=data,
                stat=stat,
                response=data.get("response"),
            )

        code = data.get("code")
        return cls(
            status_code=status_code,
            raw_body=raw_body,
            parsed_json=data,
            stat=stat,
            error_code=code if isinstance(code, int) else None,
            error_message=str(data.get("message") or "Unknown error"),
            message_detail=data.get("message_detail"),
        )

    def raise_for_stat(self) -> None:
        """
        Raise ProtocolError unless the envelope reports success.

        Raises:
            ProtocolError: If stat is absent or not "OK"
        """
        if self.ok:
            return

        message = self.error_message or "Unknown error"
        if self.message_detail:
            message = f"{message}: {self.message_detail}"
        raise ProtocolError(
            self.error_code,
            message,
            status_code=self.status_code,
            response_data=self.parsed_json,
        )
