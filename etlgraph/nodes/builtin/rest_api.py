"""REST API node: performs an HTTP request via httpx."""

import json
from typing import Any

import httpx

from etlgraph.nodes.base import BaseNode, NodeKind, NodeMeta, NodePort
from etlgraph.values import ValueMap

_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def _failure(message: str) -> dict[str, Any]:
    return {"response_text": "", "status_code": 0, "success": False, "error": message}


class RestApiNode(BaseNode):
    kind = NodeKind.REST_API
    meta = NodeMeta(
        id=NodeKind.REST_API.value,
        label="REST API",
        category="network",
        description="Make HTTP requests to REST APIs",
        inputs=[
            NodePort(name="url_override", description="Replaces the configured URL",
                     data_type="string"),
            NodePort(name="payload_data", description="Replaces the configured payload"),
        ],
        outputs=[
            NodePort(name="response_text", description="Response body", data_type="string"),
            NodePort(name="status_code", description="HTTP status code", data_type="number"),
            NodePort(name="success", description="True for a 2xx response", data_type="boolean"),
        ],
        config_schema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "title": "URL", "default": ""},
                "method": {"type": "string", "title": "Method", "enum": list(_METHODS),
                           "default": "GET"},
                "headers": {"type": "object", "title": "Headers",
                            "additionalProperties": {"type": "string"}, "default": {}},
                "payload": {"type": "string", "title": "Payload", "default": ""},
                "timeout": {"type": "number", "title": "Timeout (s)", "default": 30.0},
            },
            "required": ["url"],
        },
    )

    def __init__(self, name: str | None = None, node_id: str | None = None,
                 transport: httpx.BaseTransport | None = None):
        super().__init__(name=name, node_id=node_id)
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = self.config.get("headers") or {}
        if isinstance(headers, str):
            try:
                headers = json.loads(headers)
            except json.JSONDecodeError:
                self.log.warning(f"Ignoring malformed headers on {self.name}: {headers!r}")
                return {}
        if not isinstance(headers, dict):
            return {}
        return {str(k): str(v) for k, v in headers.items()}

    def run(self, inputs: ValueMap) -> dict[str, Any]:
        url = inputs.get("url_override") or self.config.get("url") or ""
        method = str(self.config.get("method") or "GET").upper()
        headers = self._headers()
        payload = inputs.get("payload_data", self.config.get("payload"))
        timeout = float(self.config.get("timeout") or 30.0)
        if not url:
            return _failure("No URL specified")

        content = None
        if payload not in (None, ""):
            if isinstance(payload, str):
                content = payload.encode("utf-8")
            else:
                content = json.dumps(payload).encode("utf-8")
                headers.setdefault("Content-Type", "application/json")

        try:
            with httpx.Client(transport=self.transport, timeout=timeout) as client:
                response = client.request(method, str(url), headers=headers, content=content)
        except Exception as exc:
            self.log.error(f"{method} {url} failed: {exc}")
            return _failure(str(exc) or type(exc).__name__)

        self.log.info(f"{method} {url} -> {response.status_code}")
        return {
            "response_text": response.text,
            "status_code": response.status_code,
            "success": response.is_success,
        }
