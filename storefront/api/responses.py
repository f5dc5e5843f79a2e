"""Response Sink — buffers exporter headers and bytes into a FastAPI Response."""

from fastapi import Response


class ResponseSink:
    """OutputSink implementation for the routing layer."""

    def __init__(self):
        self.headers: dict[str, str] = {}
        self.chunks: list[bytes] = []

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def write(self, payload: bytes) -> None:
        self.chunks.append(payload)

    def to_response(self) -> Response:
        headers = dict(self.headers)
        media_type = headers.pop("Content-Type", "application/octet-stream")
        return Response(
            content=b"".join(self.chunks), media_type=media_type, headers=headers,
        )
