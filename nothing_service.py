import os
import sys
from dataclasses import asdict, dataclass

from flask import Flask, request
from flask_cors import CORS

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

ALL_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']

app = Flask(__name__)

# Keep "/a//b" on the catch-all instead of redirecting to "/a/b"
app.url_map.merge_slashes = False


# flask-cors only allows methods from its own list on preflight.
# Anything else the browser asks for is echoed back here.
# Registered before CORS(app) so it runs after flask-cors' hook.
@app.after_request
def allow_any_preflight(response):
    requested_method = request.headers.get("Access-Control-Request-Method")
    if request.method != "OPTIONS" or not requested_method:
        return response

    response.headers.setdefault("Access-Control-Allow-Methods", requested_method)
    requested_headers = request.headers.get("Access-Control-Request-Headers")
    if requested_headers:
        response.headers.setdefault("Access-Control-Allow-Headers", requested_headers)
    return response


CORS(app)


@dataclass(frozen=True)
class NothingResponse:
    result: str = "nothing"


# --- THE CATCH-ALL ---
# Any path, any method, same answer.
@app.route('/', defaults={'path': ''}, methods=ALL_METHODS)
@app.route('/<path:path>', methods=ALL_METHODS)
def catch_all(path):
    print(f"📢 {request.method} /{path}")
    # jsonify would add a trailing newline
    body = app.json.dumps(asdict(NothingResponse()), separators=(",", ":"))
    return app.response_class(body, mimetype="application/json")


# Routing can still refuse a request (unknown method, odd path).
# Those get the same answer as everything else.
@app.errorhandler(404)
@app.errorhandler(405)
def routing_miss(error):
    return catch_all(request.path.lstrip('/'))


def load_settings(environ=None):
    """Return (host, port) from HOST / PORT, falling back to 0.0.0.0:3000.

    Both are optional overrides for local runs. A PORT inherited from the
    environment that is not a valid port stops startup with ValueError,
    so unset it to get the default.
    """
    if environ is None:
        environ = os.environ

    host = environ.get("HOST", DEFAULT_HOST)
    raw_port = environ.get("PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {raw_port!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"PORT must be between 1 and 65535, got {port}")
    return host, port


def main():
    try:
        host, port = load_settings()
    except ValueError as e:
        print(f"❌ ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"🚀 Nothing as a Service starting on http://{host}:{port}")
    try:
        app.run(host=host, port=port, threaded=True)
    except OSError as e:
        print(f"❌ ERROR: cannot listen on {host}:{port}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
