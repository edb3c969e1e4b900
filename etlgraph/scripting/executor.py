"""In-process Python script execution for plugin nodes."""

import builtins
import copy
import types
from typing import Any

from loguru import logger

from etlgraph.errors import ExecutionError
from etlgraph.values import ValueMap, to_value

log = logger.bind(source="ScriptExecutor")

# Allowlisted builtins for the sandbox
_SAFE_BUILTINS = {
    "len": len, "sum": sum, "min": min, "max": max, "range": range,
    "int": int, "float": float, "str": str, "list": list, "dict": dict,
    "tuple": tuple, "set": set, "bool": bool,
    "sorted": sorted, "enumerate": enumerate, "zip": zip, "map": map,
    "filter": filter, "abs": abs, "round": round, "print": print,
    "isinstance": isinstance, "type": type, "any": any, "all": all,
    "reversed": reversed, "repr": repr, "hasattr": hasattr, "getattr": getattr,
    "Exception": Exception, "ValueError": ValueError, "TypeError": TypeError,
    "KeyError": KeyError, "ZeroDivisionError": ZeroDivisionError,
    "True": True, "False": False, "None": None,
}

_SAFE_MODULES = frozenset({
    "json", "math", "re", "datetime", "statistics", "itertools",
    "functools", "collections", "string", "random",
})


def _restricted_import(name, globals=None, locals=None, fromlist=(), level=0):
    if level != 0 or name.split(".")[0] not in _SAFE_MODULES:
        raise ImportError(f"Import of '{name}' is not allowed in sandboxed scripts")
    return builtins.__import__(name, globals, locals, fromlist, level)


def _is_binding(value: Any) -> bool:
    return not isinstance(value, (types.ModuleType, types.FunctionType,
                                  types.BuiltinFunctionType, type))


class ScriptExecutor:
    """Runs a code snippet against a context and returns its public bindings.

    The context entries are bound as top-level names. After the code runs,
    every top-level name that is not private (leading underscore), not a
    module, function or class, and not a context entry left untouched is
    returned, coerced to a Value. ``run`` raises ExecutionError when the
    code fails; ``execute`` reports the failure as
    ``{"error": "Python Error: ..."}`` instead.
    """

    def __init__(self, sandbox: bool = False):
        self.sandbox = sandbox

    def _builtins(self) -> dict[str, Any]:
        if not self.sandbox:
            return vars(builtins)
        safe = dict(_SAFE_BUILTINS)
        safe["__import__"] = _restricted_import
        return safe

    def run(self, code: str, context: dict[str, Any]) -> ValueMap:
        seeded = copy.deepcopy(context)
        namespace: dict[str, Any] = {
            "__builtins__": self._builtins(),
            "__name__": "__script__",
        }
        namespace.update(seeded)

        try:
            compiled = compile(code, "<script>", "exec")
            exec(compiled, namespace)
        except Exception as exc:
            raise ExecutionError(f"Python Error: {exc}") from exc

        results: ValueMap = {}
        for name, value in namespace.items():
            if name.startswith("_") or not _is_binding(value):
                continue
            if name in seeded and value is seeded[name]:
                continue
            results[name] = to_value(value)
        return results

    def execute(self, code: str, context: dict[str, Any]) -> ValueMap:
        try:
            return self.run(code, context)
        except ExecutionError as exc:
            log.error(f"Python execution error: {exc.__cause__}")
            return {"error": str(exc)}
