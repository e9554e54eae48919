#!/usr/bin/env python3
"""
EMBED PROXY - Sanitizing proxy for third-party video embed pages
Fetches the provider's embed page, strips ads/overlays/trackers and
re-serves it with headers that allow it to be framed.
"""
import logging
import sys
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

import proxy_config
from providers import parse_request, resolve_target
from proxy_errors import ProxyError, UpstreamError
from sanitizer import sanitize
from upstream import fetch_embed

app = Flask(__name__)
app.config.update(proxy_config.as_dict())

CORS(
    app,
    resources={r'/*': {'origins': '*'}},
    methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
    allow_headers=['Content-Type', 'Authorization'],
    send_wildcard=True,
)

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    'GET /health',
    'GET /proxy/vidsrc?id=MOVIE_ID',
    'GET /proxy/vidsrc-to?id=MOVIE_ID&type=movie',
    'GET /proxy/vidsrc-me?id=MOVIE_ID&tmdb=TMDB_ID&type=movie',
]

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'


def configure_logging(level=None, log_file=None):
    """Console logging on stdout, plus a file when LOG_FILE is set"""
    level = level or app.config['LOG_LEVEL']
    log_file = log_file if log_file is not None else app.config['LOG_FILE']

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


# =============================================================================
# PREFLIGHT
# =============================================================================

@app.before_request
def short_circuit_preflight():
    """Answer every OPTIONS request with an empty 200; CORS headers are added afterwards"""
    if request.method == 'OPTIONS':
        return Response(status=200)


# =============================================================================
# ROUTES
# =============================================================================

@app.route('/')
def index():
    return jsonify({
        'status': 'OK',
        'message': 'Embed proxy is running',
        'availableEndpoints': AVAILABLE_ENDPOINTS,
    })


@app.route('/health')
@app.route('/api/health')
def health():
    """Liveness check"""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@app.route('/proxy/<provider>')
@app.route('/api/proxy/<provider>')
def proxy(provider):
    """Fetch the provider's embed page and serve a sanitized copy"""
    embed_request = parse_request(provider, request.args)
    target_url = resolve_target(embed_request)

    try:
        html = fetch_embed(target_url, timeout=app.config['UPSTREAM_TIMEOUT'])
        page = sanitize(html, target_url)
    except UpstreamError as e:
        e.provider = provider
        e.target_url = target_url
        raise

    logger.info("Served %s page for %s (%d chars)", page.branch, target_url, len(page.html))
    return Response(page.html, mimetype='text/html', headers={
        'Content-Security-Policy': page.csp,
        'X-Frame-Options': 'ALLOWALL',
    })


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.errorhandler(ProxyError)
def handle_proxy_error(e):
    if isinstance(e, UpstreamError):
        logger.error("Proxy error for %s: %s", e.provider, e.message)
    else:
        logger.warning("Rejected %s: %s", request.path, e.message)
    return jsonify(e.to_dict()), e.status_code


@app.errorhandler(404)
def handle_not_found(e):
    return jsonify({
        'error': 'Not found',
        'availableEndpoints': AVAILABLE_ENDPOINTS,
    }), 404


@app.errorhandler(405)
def handle_method_not_allowed(e):
    return jsonify({'error': 'Method not allowed'}), 405


@app.errorhandler(Exception)
def handle_unexpected(e):
    if isinstance(e, HTTPException):
        return jsonify({'error': e.name, 'message': e.description}), e.code

    logger.exception("Server error: %s", e)
    message = str(e) if app.config['DEBUG'] else 'Something went wrong'
    return jsonify({'error': 'Internal server error', 'message': message}), 500


# =============================================================================
# MAIN
# =============================================================================

def main():
    configure_logging()
    host = app.config['HOST']
    port = app.config['PORT']

    print("\n" + "=" * 70)
    print("EMBED PROXY - Sanitizing video embed proxy")
    print("=" * 70)
    print("\nAvailable endpoints:")
    for endpoint in AVAILABLE_ENDPOINTS:
        print(f"  - {endpoint}")
    print("=" * 70 + "\n")
    print(f"Starting server on http://{host}:{port}\n")

    app.run(host=host, port=port, debug=app.config['DEBUG'], threaded=True)


if __name__ == '__main__':
    main()
