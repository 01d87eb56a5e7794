"""Shared HTTP helpers used by the token check and the dependency installer.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.errors import HttpError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a GET request and parse the JSON body.

    Never raises; transport failures are reported as status 0 so callers can
    treat the endpoint as unavailable.

    Args:
        url: Target URL
        headers: Optional request headers
        session: Optional requests session (defaults to module-level requests)

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    client = session if session is not None else requests
    safe_target = safe_url(url)
    with Timer() as t:
        try:
            response = client.get(url, headers=headers, timeout=Constants.REQUEST_TIMEOUT)
        except requests.Timeout:
            logger.warning("GET %s timed out after %s seconds", safe_target, Constants.REQUEST_TIMEOUT)
            return 0, {}, None
        except requests.RequestException as exc:  # includes ConnectionError
            logger.warning("GET %s failed: %s", safe_target, exc)
            return 0, {}, None

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response %s from %s in %sms",
            response.status_code,
            safe_target,
            t.duration_ms(),
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                status_code=response.status_code,
                target=safe_target,
            ),
        )

    try:
        parsed = json.loads(response.text) if response.text else None
    except json.JSONDecodeError:
        logger.warning("GET %s returned a body that is not JSON", safe_target)
        parsed = None
    return response.status_code, dict(response.headers), parsed


def download(url: str, dest_path: str, *, session: Optional[requests.Session] = None) -> None:
    """Stream ``url`` into ``dest_path``.

    Raises:
        HttpError: on transport failure or a non-200 response.
    """
    client = session if session is not None else requests
    safe_target = safe_url(url)
    with Timer() as t:
        try:
            with client.get(url, stream=True, timeout=Constants.REQUEST_TIMEOUT) as response:
                if response.status_code != 200:
                    raise HttpError(f"could not download {safe_target}: HTTP {response.status_code}")
                with open(dest_path, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
        except requests.Timeout as exc:
            raise HttpError(
                f"download of {safe_target} timed out after {Constants.REQUEST_TIMEOUT} seconds"
            ) from exc
        except requests.RequestException as exc:
            raise HttpError(f"could not download {safe_target}: {exc}") from exc

    if is_debug_enabled(logger):
        logger.debug("Downloaded %s in %sms", safe_target, t.duration_ms())
