import logging
import sys

import uvicorn

from .app import create_app
from .core.config import Config
from .core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        config = Config.parse(False)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.binding_ip,
        port=config.port,
        timeout_keep_alive=config.tcp_connection_keepalive,
        log_level=logging.getLevelName(logging.getLogger().getEffectiveLevel()).lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
