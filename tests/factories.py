"""Builders for Lua configuration scripts used across the test suite."""

from metasearch.core.config import Features


OMIT = object()

BASE_OPTIONS = {
    "port": 8080,
    "binding_ip": "0.0.0.0",
    "theme": "simple",
    "colorscheme": "catppuccin-mocha",
    "animation": "simple-frosted-glow",
    "redis_url": "redis://127.0.0.1:8082",
    "upstream_search_engines": {"DuckDuckGo": True, "Searx": False, "Brave": True},
    "request_timeout": 30,
    "tcp_connection_keepalive": 30,
    "pool_idle_connection_timeout": 30,
    "threads": 4,
    "rate_limiter": {"number_of_requests": 20, "time_limit": 60},
    "safe_search": 2,
    "cache_expiry_time": 120,
    "debug": True,
    "logging": True,
    "adaptive_window": False,
    "production_use": False,
}

ALL_FEATURES = Features(redis_cache=True, memory_cache=True)
NO_FEATURES = Features(redis_cache=False, memory_cache=False)


def to_lua(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "nil"
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, dict):
        entries = ", ".join(f"{key} = {to_lua(item)}" for key, item in value.items())
        return "{ " + entries + " }"
    return repr(value)


def render_lua(**overrides) -> str:
    """Render a config script from the base options; OMIT drops a line."""
    options = {**BASE_OPTIONS, **overrides}
    return "\n".join(
        f"{name} = {to_lua(value)}" for name, value in options.items() if value is not OMIT
    ) + "\n"
