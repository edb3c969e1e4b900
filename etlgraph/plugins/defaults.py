"""Plugin definitions seeded into an empty plugins directory."""

from etlgraph.plugins.models import (
    DataKind,
    PluginDefinition,
    PluginInputPin,
    PluginOutputPin,
)

_INPUT_CODE = """# Input node - provides data configured in the node properties
import json
import math

data = config.get('input_data', '')
data_type = config.get('data_type', 'text')

if data_type == 'json':
    try:
        parsed = json.loads(data)
    except ValueError:
        parsed = data
elif data_type == 'number':
    try:
        parsed = float(data)
    except ValueError:
        parsed = data
    if isinstance(parsed, float) and not math.isfinite(parsed):
        parsed = data
elif data_type == 'boolean':
    parsed = str(data).lower() in ('true', '1', 'yes')
else:
    parsed = data

outputs = {'data': parsed}
"""

_OUTPUT_CODE = """# Output node - logs inputs
from datetime import datetime

timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
lines = [f'[{timestamp}] Output Node:']
for key, value in inputs.items():
    lines.append(f'  {key}: {value}')

message = '\\n'.join(lines)
print(message)

outputs = {'logged': True, 'message': message}
"""

_REST_API_CODE = """# REST API request
import json

import httpx

try:
    url = inputs.get('url_override') or config.get('url', '')
    method = config.get('method', 'GET')
    payload = inputs.get('payload_data', config.get('payload', ''))
    timeout = float(config.get('timeout') or 30)

    headers = config.get('headers', {}) or {}
    if isinstance(headers, str):
        headers = json.loads(headers) if headers.strip() else {}

    content = None
    if payload:
        if isinstance(payload, str):
            content = payload
        else:
            content = json.dumps(payload)
            headers['Content-Type'] = 'application/json'

    response = httpx.request(method, url, content=content, headers=headers, timeout=timeout)
    outputs = {
        'response_text': response.text,
        'status_code': response.status_code,
        'success': response.is_success,
    }
except Exception as e:
    outputs = {'response_text': '', 'status_code': 0, 'success': False, 'error': str(e)}
"""

_CLI_CODE = """# CLI command execution
import shlex
import subprocess

command = config.get('command', '')
args = config.get('arguments', '')
stdin_data = inputs.get('stdin_data', config.get('stdin_input', ''))
use_stdin = config.get('use_stdin', False) or 'stdin_data' in inputs

if not command:
    outputs = {'stdout': '', 'stderr': 'No command specified', 'return_code': -1,
               'error': 'No command specified'}
else:
    try:
        timeout = float(config.get('timeout') or 30)
        argv = [command] + (shlex.split(args) if isinstance(args, str) else list(args))
        result = subprocess.run(
            argv,
            input=str(stdin_data) if use_stdin else None,
            capture_output=True,
            encoding='utf-8',
            errors='replace',
            timeout=timeout,
        )
        outputs = {
            'stdout': result.stdout,
            'stderr': result.stderr,
            'return_code': result.returncode,
        }
    except subprocess.TimeoutExpired:
        message = f'Command timed out after {timeout:g}s'
        outputs = {'stdout': '', 'stderr': message, 'return_code': -1, 'error': message}
    except Exception as e:
        outputs = {'stdout': '', 'stderr': str(e), 'return_code': -1, 'error': str(e)}
"""

_STRING_TRANSFORM_CODE = """# Transform the input text
text = str(inputs.get('text', ''))
outputs = {
    'result': text.upper(),
    'original_length': len(text),
}
"""

_MATH_CODE = """# Perform calculations
a = float(inputs.get('a', 0))
b = float(inputs.get('b', 0))

outputs = {
    'sum': a + b,
    'difference': a - b,
    'product': a * b,
    'quotient': a / b if b != 0 else None,
}
"""

_JSON_PARSER_CODE = """import json

json_string = inputs.get('json_string', '{}')
path = inputs.get('path', '')

try:
    data = json.loads(json_string)
    if path:
        for key in path.split('.'):
            if key:
                data = data.get(key) if isinstance(data, dict) else None
    outputs = {'data': data, 'is_valid': True}
except Exception as e:
    outputs = {'data': None, 'is_valid': False, 'error': str(e)}
"""


def default_plugins(command_timeout: float = 30.0, http_timeout: float = 30.0) -> list[PluginDefinition]:
    """Return the stock plugin set; the timeouts seed the REST and CLI plugin configs."""
    return [
        PluginDefinition(
            name="Input",
            description="Provides input data to the graph",
            category="Core",
            icon="📥",
            output_pins=[PluginOutputPin(name="data")],
            python_process_code=_INPUT_CODE,
            config_properties={"input_data": "", "data_type": "text"},
        ),
        PluginDefinition(
            name="Output",
            description="Logs all inputs to console",
            category="Core",
            icon="📤",
            input_pins=[PluginInputPin(name="data")],
            python_process_code=_OUTPUT_CODE,
        ),
        PluginDefinition(
            name="REST API",
            description="Make HTTP requests to REST APIs",
            category="Network",
            icon="🌐",
            input_pins=[
                PluginInputPin(name="url_override", data_type=DataKind.STRING),
                PluginInputPin(name="payload_data"),
            ],
            output_pins=[
                PluginOutputPin(name="response_text", data_type=DataKind.STRING),
                PluginOutputPin(name="status_code", data_type=DataKind.NUMBER),
                PluginOutputPin(name="success", data_type=DataKind.BOOLEAN),
            ],
            python_process_code=_REST_API_CODE,
            config_properties={
                "url": "https://api.example.com",
                "method": "GET",
                "headers": "{}",
                "payload": "",
                "timeout": http_timeout,
            },
        ),
        PluginDefinition(
            name="CLI Command",
            description="Execute command-line programs",
            category="System",
            icon="⚙️",
            input_pins=[PluginInputPin(name="stdin_data", data_type=DataKind.STRING)],
            output_pins=[
                PluginOutputPin(name="stdout", data_type=DataKind.STRING),
                PluginOutputPin(name="stderr", data_type=DataKind.STRING),
                PluginOutputPin(name="return_code", data_type=DataKind.NUMBER),
            ],
            python_process_code=_CLI_CODE,
            config_properties={
                "command": "",
                "arguments": "",
                "use_stdin": False,
                "stdin_input": "",
                "timeout": command_timeout,
            },
        ),
        PluginDefinition(
            name="String Transform",
            description="Transform string using Python",
            category="Text",
            icon="📝",
            input_pins=[PluginInputPin(name="text", data_type=DataKind.STRING, required=True)],
            output_pins=[
                PluginOutputPin(name="result", data_type=DataKind.STRING),
                PluginOutputPin(
                    name="length",
                    data_type=DataKind.NUMBER,
                    python_code="result = len(str(inputs.get('text', '')))",
                ),
            ],
            python_process_code=_STRING_TRANSFORM_CODE,
        ),
        PluginDefinition(
            name="Math Calculator",
            description="Perform mathematical operations",
            category="Math",
            icon="🔢",
            input_pins=[
                PluginInputPin(name="a", data_type=DataKind.NUMBER, required=True, default_value=0),
                PluginInputPin(name="b", data_type=DataKind.NUMBER, required=True, default_value=0),
            ],
            output_pins=[
                PluginOutputPin(name="sum", data_type=DataKind.NUMBER),
                PluginOutputPin(name="difference", data_type=DataKind.NUMBER),
                PluginOutputPin(name="product", data_type=DataKind.NUMBER),
                PluginOutputPin(name="quotient", data_type=DataKind.NUMBER),
            ],
            python_process_code=_MATH_CODE,
        ),
        PluginDefinition(
            name="JSON Parser",
            description="Parse and extract data from JSON",
            category="Data",
            icon="📋",
            input_pins=[
                PluginInputPin(name="json_string", data_type=DataKind.STRING, required=True),
                PluginInputPin(name="path", data_type=DataKind.STRING, default_value=""),
            ],
            output_pins=[
                PluginOutputPin(name="data"),
                PluginOutputPin(name="is_valid", data_type=DataKind.BOOLEAN),
            ],
            python_process_code=_JSON_PARSER_CODE,
        ),
    ]
