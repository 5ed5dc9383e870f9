# app.py
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

import config
import server
from volumes import get_volumes, PressureError, PressureParseError

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(config)


# ------------------ Helpers ------------------

def empty_response(status=200):
    return app.response_class(status=status, mimetype='application/json')


def parse_float(s):
    if not s:
        raise PressureParseError("missing 'pressure'")
    # plain decimal literals only: no padding, no digit separators
    if s != s.strip() or '_' in s:
        raise PressureParseError(f"invalid numeric 'pressure': {s!r}")
    try:
        return float(s)
    except ValueError:
        raise PressureParseError(f"invalid numeric 'pressure': {s!r}") from None


# ------------------ CORS / content type ------------------

@app.before_request
def preflight():
    # answered before routing so any path gets a 200
    if request.method == 'OPTIONS':
        return empty_response()


@app.after_request
def cors_headers(response):
    response.headers['Access-Control-Allow-Methods'] = config.CORS_METHODS
    response.headers['Access-Control-Allow-Headers'] = ', '.join(config.CORS_ALLOW_HEADERS)
    response.headers['Content-Type'] = 'application/json'
    return response


# after_request hooks run in reverse order: flask_cors first, then cors_headers
CORS(app)


# ------------------ Errors ------------------

@app.errorhandler(PressureError)
def pressure_error(e):
    logger.warning("Rejected request %s: %s", request.full_path, e)
    return empty_response(500)


@app.errorhandler(HTTPException)
def http_error(e):
    response = e.get_response()
    response.set_data(b'')
    return response


# ------------------ Main API ------------------

@app.route('/phase-change-diagram', methods=['GET'])
def phase_change_diagram():
    pressure = parse_float(request.args.get('pressure'))
    result = get_volumes(pressure)
    return jsonify(result.to_dict())


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    server.run(app, config.HOST, config.PORT)


if __name__ == '__main__':
    main()
