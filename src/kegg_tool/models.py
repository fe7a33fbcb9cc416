"""Response envelope returned to the invocation host."""

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict


def _encode_default(value: Any) -> Any:
    """JSON fallback for raw payloads (pathway images) and tuples."""
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode('ascii')
    if isinstance(value, tuple):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class ToolResponse:
    """One well-formed response: either a result payload or an error payload."""

    payload: Dict[str, Any] = field(default_factory=dict)
    is_error: bool = False
    mime_type: str = 'application/json'

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.payload, indent=indent, default=_encode_default)

    def to_dict(self) -> Dict[str, Any]:
        return {'isError': self.is_error, 'mimeType': self.mime_type, 'payload': self.payload}
