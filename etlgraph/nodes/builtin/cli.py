"""CLI Command node: runs an external program and captures its output."""

import json
import os
import shlex
import subprocess
from typing import Any

from etlgraph.nodes.base import BaseNode, NodeKind, NodeMeta, NodePort
from etlgraph.values import ValueMap


def _failure(message: str) -> dict[str, Any]:
    return {"stdout": "", "stderr": message, "return_code": -1, "error": message}


class CliNode(BaseNode):
    kind = NodeKind.CLI
    meta = NodeMeta(
        id=NodeKind.CLI.value,
        label="CLI Command",
        category="system",
        description="Execute command-line programs",
        inputs=[NodePort(name="stdin_data", description="Text sent to standard input",
                         data_type="string")],
        outputs=[
            NodePort(name="stdout", description="Captured standard output", data_type="string"),
            NodePort(name="stderr", description="Captured standard error", data_type="string"),
            NodePort(name="return_code", description="Process exit code", data_type="number"),
        ],
        config_schema={
            "type": "object",
            "properties": {
                "command": {"type": "string", "title": "Command", "default": ""},
                "arguments": {"type": "array", "items": {"type": "string"},
                              "title": "Arguments", "default": []},
                "env_vars": {"type": "object", "title": "Environment",
                             "additionalProperties": {"type": "string"}, "default": {}},
                "use_stdin": {"type": "boolean", "title": "Use stdin", "default": False},
                "stdin_input": {"type": "string", "title": "Stdin text", "default": ""},
                "timeout": {"type": "number", "title": "Timeout (s)", "default": 30.0},
            },
            "required": ["command"],
        },
    )

    def _argv(self) -> list[str]:
        command = str(self.config.get("command") or "").strip()
        args = self.config.get("arguments") or []
        if isinstance(args, str):
            args = shlex.split(args)
        return [command, *(str(a) for a in args)]

    def _env(self) -> dict[str, str] | None:
        extra = self.config.get("env_vars") or {}
        if isinstance(extra, str):
            extra = json.loads(extra)
        if not isinstance(extra, dict):
            raise ValueError("env_vars must be a mapping of names to values")
        if not extra:
            return None
        env = dict(os.environ)
        env.update({str(k): str(v) for k, v in extra.items()})
        return env

    def run(self, inputs: ValueMap) -> dict[str, Any]:
        try:
            argv = self._argv()
            env = self._env()
            timeout = float(self.config.get("timeout") or 30.0)
        except (TypeError, ValueError) as exc:
            return _failure(f"Invalid configuration: {exc}")
        if not argv[0]:
            return _failure("No command specified")

        stdin = None
        if self.config.get("use_stdin") or "stdin_data" in inputs:
            stdin = inputs.get("stdin_data", self.config.get("stdin_input"))
            stdin = "" if stdin is None else str(stdin)

        self.log.info(f"Running: {shlex.join(argv)}")
        try:
            result = subprocess.run(
                argv,
                input=stdin,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            return _failure(f"Command timed out after {timeout:g}s")
        except (OSError, ValueError) as exc:
            return _failure(str(exc))

        return {
            "stdout": result.stdout,
            "stderr": result.stderr,
            "return_code": result.returncode,
        }
