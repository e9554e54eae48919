"""
Runtime configuration for the embed proxy.
Values come from the environment once at import and are copied into app.config.
"""
import os


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# --- Server ---
HOST = os.environ.get('HOST', '0.0.0.0')
PORT = int(os.environ.get('PORT', '3001'))
DEBUG = _env_bool('DEBUG')

# --- Upstream ---
UPSTREAM_TIMEOUT = float(os.environ.get('UPSTREAM_TIMEOUT', '10'))

# --- Logging ---
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.environ.get('LOG_FILE') or None


def as_dict():
    """Flask-style config mapping"""
    return {
        'HOST': HOST,
        'PORT': PORT,
        'DEBUG': DEBUG,
        'UPSTREAM_TIMEOUT': UPSTREAM_TIMEOUT,
        'LOG_LEVEL': LOG_LEVEL,
        'LOG_FILE': LOG_FILE,
    }
