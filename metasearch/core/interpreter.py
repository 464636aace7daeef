"""Script execution back ends for the configuration loader.

A configuration source takes the raw bytes of an operator-written script,
runs it in a fresh, isolated interpreter and hands back the names the script
defined as plain Python values. The loader never keeps a reference to the
interpreter, so nothing survives from one load to the next.
"""

from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Protocol

from lupa import LuaError, LuaRuntime, lua_type

from .errors import InterpreterError


# Runs `text` with its own global table. Reads fall through to the standard
# library, writes stay in `env`. Lua 5.1/LuaJIT lack the `env` argument of
# `load`, so they get `setfenv` instead.
_RUN_IN_ENV = b"""
function(text, name)
    local env = setmetatable({}, {__index = _G})
    local chunk, err
    if setfenv and loadstring then
        chunk, err = loadstring(text, name)
        if chunk then setfenv(chunk, env) end
    else
        chunk, err = load(text, name, "t", env)
    end
    if not chunk then
        error(err, 0)
    end
    chunk()
    return env
end
"""

# Numbers each distinct table, so shared and self-referencing tables convert
# to a single dict.
_TABLE_IDS = b"""
function()
    local ids, count = setmetatable({}, {__mode = "k"}), 0
    return function(t)
        local id = ids[t]
        if id == nil then
            count = count + 1
            ids[t] = count
            id = count
        end
        return id
    end
end
"""


class ScriptSource(Protocol):
    def execute(self, script: bytes, name: str = "config") -> Dict[str, Any]:
        ...


class _LuaConverter:
    """Copy Lua values into Python: tables to dicts, UTF-8 strings to str.

    Strings that are not valid UTF-8 stay bytes, so a bad option fails
    type checking under its own name instead of failing the whole load.
    """

    def __init__(self, lua: LuaRuntime):
        self._table_id = lua.eval(_TABLE_IDS)()
        self._seen: Dict[Any, Dict[Any, Any]] = {}

    def convert(self, value: Any) -> Any:
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError:
                return value
        if lua_type(value) != "table":
            return value

        table_id = self._table_id(value)
        if table_id in self._seen:
            return self._seen[table_id]
        result: Dict[Any, Any] = {}
        self._seen[table_id] = result
        for key, item in value.items():
            # Table keys stay Lua objects; dicts are not hashable.
            if lua_type(key) != "table":
                key = self.convert(key)
            result[key] = self.convert(item)
        return result


class LuaScriptSource:
    """Execute configuration scripts written in Lua."""

    def execute(self, script: bytes, name: str = "config") -> Dict[str, Any]:
        # Scripts get no access to Python objects from inside Lua.
        lua = LuaRuntime(encoding=None, register_eval=False, register_builtins=False)
        run_in_env = lua.eval(_RUN_IN_ENV)
        try:
            env = run_in_env(script, f"={name}".encode("utf-8"))
            converter = _LuaConverter(lua)
            namespace = {converter.convert(key): converter.convert(value) for key, value in env.items()}
        except (LuaError, RecursionError) as e:
            raise InterpreterError(f"Config Error: failed to run {name}: {e}") from e
        return namespace


class PythonScriptSource:
    """Execute configuration scripts written in Python.

    The script runs with full interpreter privileges, so only use this for
    configuration files the operator controls. Module objects and
    underscore-prefixed names are left out of the result so that helper
    imports in the script do not leak into the namespace.
    """

    def execute(self, script: bytes, name: str = "config") -> Dict[str, Any]:
        namespace: Dict[str, Any] = {"__name__": "__config__", "__file__": name}
        try:
            exec(compile(script, name, "exec"), namespace)
        except Exception as e:
            raise InterpreterError(
                f"Config Error: failed to run {name}: {type(e).__name__}: {e}"
            ) from e
        return {
            key: value
            for key, value in namespace.items()
            if not key.startswith("_") and not isinstance(value, ModuleType)
        }


_SOURCES_BY_SUFFIX = {
    ".lua": LuaScriptSource,
    ".py": PythonScriptSource,
}


def source_for_path(path: Path) -> ScriptSource:
    """Pick the script source matching the file extension of `path`."""
    suffix = Path(path).suffix.lower()
    try:
        source_cls = _SOURCES_BY_SUFFIX[suffix]
    except KeyError:
        raise InterpreterError(
            f"Config Error: unsupported configuration script type '{suffix}' for {path}; "
            f"expected one of {', '.join(sorted(_SOURCES_BY_SUFFIX))}"
        ) from None
    return source_cls()
