"""Action boundary: turn failures of user-triggered operations into messages."""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable

import aiohttp

from storefront.core.exceptions import StorefrontException
from storefront.logging_config import logger

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    value: Any = None
    error: str | None = None
    reload_required: bool = False


async def run_action(func: Callable[..., Any], *args: Any, **kwargs: Any) -> ActionResult:
    """Run a sync or async action and never let an error escape.

    Known storefront errors become a user-facing message. Anything else is a
    programming error: it is logged and flagged so the caller can offer a
    full reload.
    """
    try:
        value = func(*args, **kwargs)
        if inspect.isawaitable(value):
            value = await value
    except StorefrontException as exc:
        logger.info("Action %s failed: %s", getattr(func, "__name__", func), exc.message)
        return ActionResult(ok=False, error=exc.message)
    except aiohttp.ClientError as exc:
        logger.warning("Action %s network failure: %s", getattr(func, "__name__", func), exc)
        return ActionResult(ok=False, error=str(exc) or "Network request failed")
    except Exception as exc:
        logger.exception("Unexpected error in action %s", getattr(func, "__name__", func))
        return ActionResult(ok=False, error=str(exc) or UNEXPECTED_ERROR_MESSAGE, reload_required=True)
    return ActionResult(ok=True, value=value)
