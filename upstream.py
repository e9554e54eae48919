"""
Upstream fetch - one GET against the embed origin, browser-like headers
"""
import codecs
import logging
import socket
import threading
import time

import requests

from proxy_errors import FetchFailedError, FetchTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
CHUNK_SIZE = 8192

BROWSER_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Referer': 'https://google.com',
}


def _timeout_error(timeout):
    return FetchTimeoutError(f"Upstream request timed out after {timeout}s")


def _abort_connection(resp, aborted):
    """Shut the upstream socket down so a read blocked on a slow body returns"""
    aborted.set()
    conn = getattr(resp.raw, 'connection', None)
    sock = getattr(conn, 'sock', None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Already closed by the peer
        pass


def _response_encoding(resp):
    """Declared charset when there is a valid one, UTF-8 otherwise"""
    content_type = resp.headers.get('Content-Type', '').lower()
    if 'charset' in content_type and resp.encoding:
        try:
            return codecs.lookup(resp.encoding).name
        except LookupError:
            logger.warning("Unknown upstream charset %r, decoding as utf-8", resp.encoding)
    return 'utf-8'


def _read_body(resp, deadline, timeout):
    """Read the streamed body, giving up once the overall deadline passes"""
    aborted = threading.Event()
    watchdog = threading.Timer(max(deadline - time.monotonic(), 0), _abort_connection, args=(resp, aborted))
    watchdog.daemon = True
    watchdog.start()

    chunks = []
    try:
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            if aborted.is_set() or time.monotonic() >= deadline:
                raise _timeout_error(timeout)
            chunks.append(chunk)
    except (requests.exceptions.RequestException, OSError) as e:
        if aborted.is_set() or time.monotonic() >= deadline:
            raise _timeout_error(timeout) from e
        raise FetchFailedError(str(e)) from e
    finally:
        watchdog.cancel()

    # A close-delimited body ends cleanly after the shutdown, so check again
    if aborted.is_set():
        raise _timeout_error(timeout)
    return b''.join(chunks)


def fetch_embed(url, timeout=None, session=None):
    """Fetch the embed page and return its body as text.

    The timeout bounds the whole fetch, body included. A single attempt is
    made; retrying is left to the client.
    Raises FetchTimeoutError or FetchFailedError.
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUT
    http = session or requests
    deadline = time.monotonic() + timeout

    logger.info("Fetching: %s", url)
    try:
        resp = http.get(url, headers=BROWSER_HEADERS, timeout=timeout, allow_redirects=True, stream=True)
    except requests.exceptions.Timeout as e:
        logger.warning("Upstream timeout after %ss: %s", timeout, url)
        raise _timeout_error(timeout) from e
    except requests.exceptions.RequestException as e:
        logger.warning("Upstream request failed for %s: %s", url, e)
        raise FetchFailedError(str(e)) from e

    try:
        if not 200 <= resp.status_code < 300:
            logger.warning("Upstream %s responded %s", url, resp.status_code)
            raise FetchFailedError(f"HTTP {resp.status_code}: {resp.reason}", status_code=resp.status_code)

        try:
            raw = _read_body(resp, deadline, timeout)
        except FetchTimeoutError:
            logger.warning("Upstream timeout after %ss while reading body: %s", timeout, url)
            raise
    finally:
        resp.close()

    html = raw.decode(_response_encoding(resp), errors='replace')
    logger.info("Upstream %s responded %s (%d chars)", url, resp.status_code, len(html))
    return html
