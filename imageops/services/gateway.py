"""
Processing Gateway - the single call site of the image engine.

Everything that comes out of the engine while transforming an image,
whether an EngineError, a Pillow decoder exception or an unexpected
runtime fault, is turned into a ProcessingError inside a scoped boundary.
The boundary lives for exactly one ``process`` call.
"""
import time
from contextlib import contextmanager
from typing import Iterator

from imageops import engine
from imageops.core.errors import ServiceError, processing_error
from imageops.core.logging_config import get_logger
from imageops.models import Image

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "image engine internal error"


def describe_engine_failure(exc: BaseException) -> str:
    """Message reported to clients for an engine failure.

    EngineError messages are kept verbatim, other exceptions contribute
    their text, and anything without a message gets a generic one.
    """
    if isinstance(exc, engine.EngineError):
        return exc.message or INTERNAL_ERROR_MESSAGE
    return str(exc) or INTERNAL_ERROR_MESSAGE


@contextmanager
def engine_failure_boundary(**context) -> Iterator[None]:
    """Convert any exception raised in the block into a ProcessingError.

    ServiceErrors pass through untouched: they are already classified.
    """
    try:
        yield
    except ServiceError:
        raise
    except Exception as exc:
        message = describe_engine_failure(exc)
        logger.error(
            "engine_call_failed",
            error_type=type(exc).__name__,
            error=message,
            exc_info=True,
            **context,
        )
        raise processing_error(message, details={"engine_error": type(exc).__name__}) from exc


def process(buf: bytes, options: engine.EngineOptions) -> Image:
    """Run the engine transformation and wrap the output with its MIME type.

    The MIME type is derived from the bytes the engine produced, never from
    the requested output type.

    Raises:
        ProcessingError: if the engine fails in any way
    """
    start_time = time.time()

    with engine_failure_boundary(input_bytes=len(buf)):
        output = engine.resize(buf, options)

    mime = engine.mime_type_for(engine.determine_image_type(output))
    duration_ms = (time.time() - start_time) * 1000
    logger.debug(
        "engine_call_completed",
        input_bytes=len(buf),
        output_bytes=len(output),
        mime=mime,
        duration_ms=round(duration_ms, 2),
    )
    return Image(body=output, mime=mime)
