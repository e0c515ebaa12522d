import logging
import re

from flask import jsonify, request
from flask_cors import CORS


logger = logging.getLogger(__name__)

cors = CORS()

# Allow-list entries containing any of these are compiled as given.
_REGEX_CHARS = frozenset("*\\[]?$^()")


def normalize_origins(origins):
    """Compile every allow-list entry into a case-insensitive pattern.

    Literal entries lose any trailing slash and must match in full. The
    result is handed to both flask-cors and is_origin_allowed so the 403
    check and the response headers agree on every origin.
    """
    normalized = []
    for origin in origins:
        if isinstance(origin, re.Pattern):
            normalized.append(origin)
        elif _REGEX_CHARS.intersection(origin):
            normalized.append(re.compile(origin, re.IGNORECASE))
        else:
            literal = re.escape(origin.rstrip("/")) + r"\Z"
            normalized.append(re.compile(literal, re.IGNORECASE))
    return normalized


def is_origin_allowed(origin, allowed_origins) -> bool:
    """Requests without an Origin header (same host, curl, servers) always pass."""
    if not origin:
        return True

    return any(allowed.match(origin) for allowed in allowed_origins)


def init_cors(app):
    allowed_origins = normalize_origins(app.config["CORS_ALLOWED_ORIGINS"])

    cors.init_app(
        app,
        resources={r"/api/*": {"origins": allowed_origins}},
    )

    @app.before_request
    def reject_disallowed_origin():
        origin = request.headers.get("Origin")
        if is_origin_allowed(origin, allowed_origins):
            return None

        logger.warning("Rejected request from origin %s to %s", origin, request.path)
        return jsonify({"error": "Not allowed by CORS"}), 403
