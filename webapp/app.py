"""Flask application factory for the WorkSphere API."""

import logging
from typing import Optional

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from core.context import AppContext, build_context
from core.errors import AppError
from storage import PUBLIC_PREFIX
from webapp.auth import EXTENSION_KEY
from webapp.routes import BLUEPRINTS_BY_DOMAIN

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

UPLOAD_OVERHEAD = 1024 * 1024


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(AppError)
    def handle_app_error(e: AppError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({'success': False, 'message': e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.error(f"Error in {request.method} {request.path}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Server error'}), 500


def create_app(context: Optional[AppContext] = None) -> Flask:
    """Build the Flask app around ``context`` (built from settings when omitted)."""
    if context is None:
        context = build_context()
    settings = context.settings

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = context
    app.config['MAX_CONTENT_LENGTH'] = max(
        settings.MAX_RESUME_SIZE, settings.MAX_PHOTO_SIZE, settings.MAX_CERTIFICATE_SIZE,
        settings.MAX_LOGO_SIZE, settings.MAX_VIDEO_SIZE,
    ) + UPLOAD_OVERHEAD
    app.json.sort_keys = False

    CORS(app, origins=[settings.FRONTEND_URL], supports_credentials=True)

    domains = {}
    for domain_name, blueprints in BLUEPRINTS_BY_DOMAIN.items():
        for blueprint in blueprints:
            app.register_blueprint(blueprint)
            domains[blueprint.name] = context.sessions[domain_name]

    @app.before_request
    def load_session_domain():
        domain = domains.get(request.blueprint)
        if domain is not None:
            domain.activate()

    @app.after_request
    def save_session_cookies(response):
        for domain in context.sessions.values():
            response = domain.save_cookie(response)
        return response

    @app.route(f"{PUBLIC_PREFIX}/<path:filename>", methods=['GET'])
    def serve_upload(filename: str):
        return send_from_directory(str(context.assets.base_dir), filename)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({'success': True, 'message': "WorkSphere API is running"})

    _register_error_handlers(app)
    logger.info(f"Registered {len(app.blueprints)} blueprints")
    return app


def run_web_server(host: str = '127.0.0.1', port: int = 5000, debug: bool = False,
                   context: Optional[AppContext] = None) -> None:
    """Run the development server."""
    app = create_app(context)
    logger.info(f"Starting web server on http://{host}:{port}")
    try:
        app.run(host=host, port=port, debug=debug)
    finally:
        app.extensions[EXTENSION_KEY].close()
