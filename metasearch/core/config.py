import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigFileNotFoundError
from .extraction import BOOL, BOOL_MAP, OPTIONAL_STR, STR, U16, U8, U8_MAP, get_typed, require_key
from .handler import FileType, file_path
from .interpreter import ScriptSource, source_for_path
from .validation import (
    available_parallelism,
    validate_cache_expiry_time,
    validate_safe_search,
    validate_threads,
)


load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FEATURES_ENV = "METASEARCH_FEATURES"
DEFAULT_FEATURES = "memory-cache"


def set_logging_level(debug: bool, logging_enabled: bool) -> None:
    """Configure process-wide logging from the `debug` and `logging` options.

    `PKG_ENV=dev` forces debug output regardless of the options.
    """
    if os.getenv("PKG_ENV", "").lower() == "dev":
        level = logging.DEBUG
    elif debug:
        level = logging.DEBUG
    elif logging_enabled:
        level = logging.INFO
    else:
        level = logging.ERROR

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler()])


@dataclass(frozen=True)
class Features:
    """Optional backends this deployment is built with."""

    redis_cache: bool = False
    memory_cache: bool = True

    @property
    def any_cache(self) -> bool:
        return self.redis_cache or self.memory_cache

    @classmethod
    def from_names(cls, names: str) -> "Features":
        enabled = {name.strip().lower() for name in names.split(",") if name.strip()}
        return cls(redis_cache="redis-cache" in enabled, memory_cache="memory-cache" in enabled)

    @classmethod
    def from_env(cls) -> "Features":
        return cls.from_names(os.getenv(FEATURES_ENV, DEFAULT_FEATURES))


@dataclass(frozen=True)
class Style:
    theme: str
    colorscheme: str
    animation: Optional[str] = None


@dataclass(frozen=True)
class AggregatorConfig:
    # Adds a random delay between upstream requests to avoid being rate limited.
    random_delay: bool


@dataclass(frozen=True)
class RateLimiter:
    number_of_requests: int
    time_limit: int


@dataclass(frozen=True)
class Config:
    """Validated service configuration loaded from the operator's script.

    Built once at startup by `Config.parse` and handed to the HTTP layer.
    `redis_url` and `cache_expiry_time` are None when the deployment does
    not include the corresponding cache feature.
    """

    port: int
    binding_ip: str
    style: Style
    upstream_search_engines: Mapping[str, bool]
    request_timeout: int
    tcp_connection_keepalive: int
    pool_idle_connection_timeout: int
    threads: int
    rate_limiter: RateLimiter
    safe_search: int
    debug: bool
    logging: bool
    adaptive_window: bool
    aggregator: AggregatorConfig
    redis_url: Optional[str] = None
    cache_expiry_time: Optional[int] = None

    @classmethod
    def parse(
        cls,
        logging_initialized: bool,
        *,
        path: Optional[Path] = None,
        features: Optional[Features] = None,
        source: Optional[ScriptSource] = None,
        parallelism: Optional[int] = None,
    ) -> "Config":
        """Run the configuration script and build a validated `Config`.

        Args:
            logging_initialized: True when the caller already configured
                logging; otherwise logging is set up from the script's
                `debug` and `logging` options.
            path: Script to load. Defaults to the resolved `config.lua`.
            features: Enabled cache features. Defaults to `METASEARCH_FEATURES`.
            source: Interpreter to run the script with. Defaults to one chosen
                from the file extension.
            parallelism: CPU count used when `threads` is 0. Detected when
                not given.

        Raises:
            ConfigurationError: the script is missing, fails to run, or lacks
                a required option or holds one of the wrong type.
        """
        if path is None:
            path = file_path(FileType.CONFIG)
        elif not Path(path).is_file():
            raise ConfigFileNotFoundError(Path(path).name, [str(path)])
        if features is None:
            features = Features.from_env()
        if source is None:
            source = source_for_path(path)

        # Raw bytes: Lua strings may hold any byte sequence.
        script = Path(path).read_bytes()
        globals_ = source.execute(script, name=Path(path).name)

        port = get_typed(globals_, "port", U16)
        binding_ip = get_typed(globals_, "binding_ip", STR)
        style = Style(
            theme=get_typed(globals_, "theme", STR),
            colorscheme=get_typed(globals_, "colorscheme", STR),
            animation=get_typed(globals_, "animation", OPTIONAL_STR),
        )
        upstream_search_engines = get_typed(globals_, "upstream_search_engines", BOOL_MAP)
        request_timeout = get_typed(globals_, "request_timeout", U8)
        tcp_connection_keepalive = get_typed(globals_, "tcp_connection_keepalive", U8)
        pool_idle_connection_timeout = get_typed(globals_, "pool_idle_connection_timeout", U8)
        parsed_threads = get_typed(globals_, "threads", U8)
        rate_limiter = get_typed(globals_, "rate_limiter", U8_MAP)
        parsed_safe_search = get_typed(globals_, "safe_search", U8)
        parsed_cache_expiry_time = (
            get_typed(globals_, "cache_expiry_time", U16) if features.any_cache else None
        )
        debug = get_typed(globals_, "debug", BOOL)
        logging_enabled = get_typed(globals_, "logging", BOOL)
        adaptive_window = get_typed(globals_, "adaptive_window", BOOL)
        production_use = get_typed(globals_, "production_use", BOOL)
        redis_url = get_typed(globals_, "redis_url", STR) if features.redis_cache else None

        if not logging_initialized:
            set_logging_level(debug, logging_enabled)
        logger.info(f"Configuration loaded from {path}")
        logger.debug(f"Configuration script run with {type(source).__name__}")

        if parsed_threads == 0 and parallelism is None:
            parallelism = available_parallelism()
        threads = validate_threads(parsed_threads, parallelism)
        safe_search = validate_safe_search(parsed_safe_search)
        cache_expiry_time = (
            validate_cache_expiry_time(parsed_cache_expiry_time)
            if parsed_cache_expiry_time is not None
            else None
        )

        return cls(
            port=port,
            binding_ip=binding_ip,
            style=style,
            upstream_search_engines=MappingProxyType(upstream_search_engines),
            request_timeout=request_timeout,
            tcp_connection_keepalive=tcp_connection_keepalive,
            pool_idle_connection_timeout=pool_idle_connection_timeout,
            threads=threads,
            rate_limiter=RateLimiter(
                number_of_requests=require_key(rate_limiter, "rate_limiter", "number_of_requests"),
                time_limit=require_key(rate_limiter, "rate_limiter", "time_limit"),
            ),
            safe_search=safe_search,
            debug=debug,
            logging=logging_enabled,
            adaptive_window=adaptive_window,
            aggregator=AggregatorConfig(random_delay=production_use),
            redis_url=redis_url,
            cache_expiry_time=cache_expiry_time,
        )

    def enabled_engines(self) -> list[str]:
        return [name for name, enabled in self.upstream_search_engines.items() if enabled]
