import logging
import time
import uuid
from datetime import datetime, timezone

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, HTTPException, NotFound, RequestEntityTooLarge

from pwcheck import __version__
from pwcheck.config import Settings
from pwcheck.dictionary import DictionaryLoader
from pwcheck.errors import PasswordEvaluationError, SecurityInvariantViolation
from pwcheck.evaluator import PasswordEvaluator
from pwcheck.generator import MAX_GENERATED_LENGTH, MIN_GENERATED_LENGTH, generate_secure_password

logger = logging.getLogger("pwcheck.api")

SERVICE_NAME = "Password Entropy Evaluation API"
EVALUATE_ENDPOINT = "/api/v1/password/evaluate"

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "GET /api/v1/password/info",
    "POST /api/v1/password/evaluate",
    "POST /api/v1/password/generate",
]

SAFE_MESSAGES = {
    "INVALID_TYPE": "Wrong data type for password",
    "EMPTY_INPUT": "Empty input",
    "TOO_LONG": "Input too long",
}


def _timestamp():
    return datetime.now(timezone.utc).isoformat()


def _error(status, error, message, **extra):
    body = {"success": False, "error": error, "message": message}
    body.update(extra)
    body["timestamp"] = _timestamp()
    return jsonify(body), status


def _evaluator():
    return current_app.extensions["pwcheck"]["evaluator"]


def _loader():
    return current_app.extensions["pwcheck"]["loader"]


def validate_request():
    errors = []
    if not request.is_json:
        errors.append("CONTENT_TYPE_INVALID: application/json is required")
        return None, errors
    # malformed JSON raises BadRequest, reported as INVALID_JSON
    body = request.get_json()
    if not isinstance(body, dict):
        errors.append("BODY_MISSING: a JSON object body is required")
        return None, errors
    if "password" not in body:
        errors.append('FIELD_MISSING: field "password" is required')
    return body, errors


def register_routes(app):
    @app.route("/")
    def index():
        loader = _loader()
        return jsonify({
            "message": SERVICE_NAME,
            "version": __version__,
            "mainEndpoint": "POST " + EVALUATE_ENDPOINT,
            "documentation": "GET /api/v1/password/info",
            "health": "GET /health",
            "security": "Submitted passwords are never stored or logged",
            "dictionary": {
                "loaded": loader.loaded,
                "size": loader.store.size() if loader.loaded else 0,
            },
            "timestamp": _timestamp(),
        })

    @app.route("/health")
    def health():
        loader = _loader()
        store = loader.store
        return jsonify({
            "success": True,
            "status": "degraded" if store is not None and store.degraded else "healthy",
            "service": SERVICE_NAME,
            "version": __version__,
            "dictionary": {
                "loaded": loader.loaded,
                "size": store.size() if store is not None else 0,
                "degraded": store.degraded if store is not None else False,
                "source": store.source if store is not None else None,
            },
            "uptime": round(time.monotonic() - app.config["STARTED_AT"], 3),
            "timestamp": _timestamp(),
        })

    @app.route("/api/v1/password/info")
    def api_info():
        return jsonify({
            "name": SERVICE_NAME,
            "version": __version__,
            "endpoints": {
                "evaluate": {
                    "method": "POST",
                    "path": EVALUATE_ENDPOINT,
                    "body": {"password": "string (required)"},
                },
                "generate": {
                    "method": "POST",
                    "path": "/api/v1/password/generate",
                    "body": {
                        "length": f"integer {MIN_GENERATED_LENGTH}-{MAX_GENERATED_LENGTH}",
                        "includeLowercase": "boolean",
                        "includeUppercase": "boolean",
                        "includeNumbers": "boolean",
                        "includeSymbols": "boolean",
                    },
                },
                "info": {"method": "GET", "path": "/api/v1/password/info"},
            },
            "entropyCalculation": {
                "formula": "E = L × log₂(N)",
                "strengthCategories": {
                    "Very Weak": "0-30 bits",
                    "Weak": "30-60 bits",
                    "Strong": "60-80 bits",
                    "Very Strong": "80-100 bits",
                    "Extremely Strong": "100+ bits",
                },
            },
            "similarityAnalysis": {
                "detectionTypes": {
                    "EXACT_MATCH": "Exact match with a common password",
                    "SIMPLE_VARIATION": "Common suffix or prefix added, or first/last character dropped",
                    "CHARACTER_REMOVAL": "Matches after removing 1-2 characters",
                    "LEET_SPEAK_SUBSTITUTION": "Matches after undoing substitutions such as @ for a or 3 for e",
                    "CONTAINS_COMMON": "Contains a common password",
                    "SUBSTRING_MATCH": "Is part of a common password",
                },
                "riskLevels": {
                    "CRITICAL": "Exact match, change immediately",
                    "HIGH": "Very similar, high risk of attack",
                    "MEDIUM": "Moderate similarity, consider changing",
                    "LOW": "No similarity detected",
                },
            },
            "security": {
                "zeroPersistence": "Passwords are never stored or logged",
                "sanitizedResponse": "Responses never echo the submitted password",
            },
            "timestamp": _timestamp(),
        })

    @app.route(EVALUATE_ENDPOINT, methods=["POST"])
    def evaluate_password():
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        body, errors = validate_request()
        if errors:
            logger.info("[%s] invalid request: %s", request_id, ", ".join(errors))
            return _error(
                400, "INVALID_REQUEST", "Invalid request", details=errors, requestId=request_id,
            )

        password = body["password"]
        logger.info(
            "[%s] evaluating password of length %s",
            request_id, len(password) if isinstance(password, str) else "n/a",
        )
        evaluation = _evaluator().evaluate(password)
        logger.info(
            "[%s] entropy=%.2f category=%s match=%s risk=%s",
            request_id,
            evaluation.entropy.entropy,
            evaluation.final.label,
            evaluation.finding.kind.code,
            evaluation.risk_level.value,
        )
        return jsonify({
            "success": True,
            "data": {"evaluation": evaluation.to_dict()},
            "metadata": {
                "requestId": request_id,
                "endpoint": EVALUATE_ENDPOINT,
                "version": __version__,
            },
            "timestamp": _timestamp(),
        })

    @app.route("/api/v1/password/generate", methods=["POST"])
    def generate_password():
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            return _error(400, "INVALID_REQUEST", "Request body must be a JSON object")
        length = body.get("length", 16)
        if (
            isinstance(length, bool)
            or not isinstance(length, int)
            or not MIN_GENERATED_LENGTH <= length <= MAX_GENERATED_LENGTH
        ):
            return _error(
                400,
                "INVALID_LENGTH",
                f"length must be an integer between {MIN_GENERATED_LENGTH} and {MAX_GENERATED_LENGTH}",
            )
        options = {
            "include_lowercase": bool(body.get("includeLowercase", True)),
            "include_uppercase": bool(body.get("includeUppercase", True)),
            "include_numbers": bool(body.get("includeNumbers", True)),
            "include_symbols": bool(body.get("includeSymbols", True)),
        }
        try:
            generated = generate_secure_password(length, **options)
        except ValueError as exc:
            return _error(400, "GENERATION_ERROR", str(exc))

        evaluation = _evaluator().evaluate(generated)
        return jsonify({
            "success": True,
            "data": {
                "generatedPassword": generated,
                "evaluation": evaluation.to_dict(),
                "parameters": {
                    "length": length,
                    "includeLowercase": options["include_lowercase"],
                    "includeUppercase": options["include_uppercase"],
                    "includeNumbers": options["include_numbers"],
                    "includeSymbols": options["include_symbols"],
                },
                "generator": "CSPRNG (secrets)",
            },
            "timestamp": _timestamp(),
        })


def register_error_handlers(app):
    @app.errorhandler(SecurityInvariantViolation)
    def handle_security_violation(exc):
        logger.error("Response aborted: %s", exc.code)
        return _error(500, exc.code, "Internal server error")

    @app.errorhandler(PasswordEvaluationError)
    def handle_evaluation_error(exc):
        logger.info("Evaluation rejected: %s", exc.code)
        return _error(400, exc.code, SAFE_MESSAGES.get(exc.code, exc.message))

    @app.errorhandler(NotFound)
    def handle_not_found(exc):
        return _error(
            404, "ENDPOINT_NOT_FOUND", "Endpoint not found", availableEndpoints=AVAILABLE_ENDPOINTS,
        )

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(exc):
        return _error(
            413,
            "PAYLOAD_TOO_LARGE",
            "Request too large",
            maxSize=app.config["MAX_CONTENT_LENGTH"],
        )

    @app.errorhandler(BadRequest)
    def handle_bad_request(exc):
        return _error(400, "INVALID_JSON", "Malformed JSON")

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return _error(exc.code, exc.name.upper().replace(" ", "_"), exc.name)

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        logger.exception("Unhandled error: %s", exc.__class__.__name__)
        return _error(500, "INTERNAL_SERVER_ERROR", "Internal server error")


def create_app(settings=None):
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.config["STARTED_AT"] = time.monotonic()
    app.config["PWCHECK_SETTINGS"] = settings

    # Load the dictionary once per process and share it across requests
    loader = DictionaryLoader(settings.dictionary_path)
    evaluator = PasswordEvaluator(
        loader,
        attempts_per_second=settings.attempts_per_second,
        sample_limit=settings.substring_sample_limit,
    )
    app.extensions["pwcheck"] = {"loader": loader, "evaluator": evaluator}
    if settings.preload_dictionary:
        loader.ensure_loaded()

    register_routes(app)
    register_error_handlers(app)
    return app


if __name__ == '__main__':
    create_app().run(debug=True)
