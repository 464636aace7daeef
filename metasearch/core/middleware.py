import logging
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


async def log_requests(request: Request, call_next: Callable):
    start_time = time.time()
    request_id = f"{int(time.time() * 1000)}-{id(request)}"
    request_timeout = request.app.state.config.request_timeout

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        if process_time > request_timeout:
            logger.warning(
                f"[{request_id}] {request.method} {request.url.path} - {response.status_code} - "
                f"{process_time:.2f}s exceeds request_timeout of {request_timeout}s"
            )
        else:
            logger.info(f"[{request_id}] {request.method} {request.url.path} - {response.status_code} - {process_time:.2f}s")
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"[{request_id}] {request.method} {request.url.path} - ERROR: {str(e)} - {process_time:.2f}s")
        raise


async def global_exception_handler(request: Request, exc: Exception):
    request_id = f"{int(time.time() * 1000)}-{id(request)}"
    logger.error(f"[{request_id}] Unhandled exception in {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
