"""
Flask Main Application
HTTP surface for the widget host and the app bridge
"""

from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException
import logging
import traceback
from datetime import datetime, timezone
import os

from .core.config import Settings, settings as default_settings
from .core.exceptions import WidgetServiceError
from .database import check_database_health
from .runtime import WidgetRuntime

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "health": "/health",
    "info": "/info",
    "bridge": "/bridge/<method>",
    "widget": "/widget/instances, /widget/refresh"
}

def _configure_jwt(app: Flask, settings: Settings) -> JWTManager:
    # Tokens are issued by the mobile app's auth service; the identity is the user id
    app.config['JWT_SECRET_KEY'] = settings.SECRET_KEY
    app.config['JWT_ALGORITHM'] = settings.JWT_ALGORITHM
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    app.config['JWT_TOKEN_LOCATION'] = ['headers']
    app.config['JWT_ERROR_MESSAGE_KEY'] = 'message'
    jwt = JWTManager(app)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired", "error_type": "token_expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"error": f"Invalid token: {reason}", "error_type": "invalid_token"}), 422

    return jwt

def _register_error_handlers(app: Flask, settings: Settings):
    @app.errorhandler(WidgetServiceError)
    def handle_service_error(error):
        logger.warning(f"{error.error_type} ({error.status_code}): {error.detail}")
        return jsonify({
            "error": error.detail,
            "error_type": error.error_type,
            "extra_data": error.extra_data
        }), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        logger.info(f"404 Not Found: {request.path}")
        return jsonify({
            "error": "Endpoint not found",
            "error_type": "not_found",
            "available_endpoints": ENDPOINTS
        }), 404

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return error
        logger.error(f"Unhandled exception on {request.path}: {error}\n{traceback.format_exc()}")
        return jsonify({
            "error": "Internal server error",
            "error_type": "internal_error",
            "message": str(error) if settings.DEBUG else "An unexpected error occurred"
        }), 500

def create_app(runtime: WidgetRuntime = None):
    """Create and configure Flask application"""
    runtime = runtime or WidgetRuntime()
    settings = runtime.settings

    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = Flask(__name__)
    app.config['SECRET_KEY'] = settings.SECRET_KEY
    app.extensions['horario_widget'] = runtime

    _configure_jwt(app, settings)
    CORS(app, origins=settings.ALLOWED_ORIGINS, supports_credentials=True)
    _register_error_handlers(app, settings)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Service status plus database status when a MongoDB backend is configured"""
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": check_database_health() if runtime.uses_database else {"status": "not_used"},
            "data_source": runtime.source.name,
            "preferences": runtime.store.preferences.name,
            "live_instances": len(runtime.host.get_instance_ids())
        })

    @app.route('/info', methods=['GET'])
    def app_info():
        return jsonify({
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "widget": runtime.bridge.info.model_dump(),
            "channel": settings.WIDGET_CHANNEL,
            "data_source": runtime.source.name,
            "locale": runtime.messages.locale,
            "debug": settings.DEBUG
        })

    @app.route('/', methods=['GET'])
    def root():
        return jsonify({
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "status": "operational",
            "endpoints": ENDPOINTS
        })

    from .routers.flask_bridge import bridge_bp
    from .routers.flask_widget import widget_bp

    app.register_blueprint(bridge_bp, url_prefix='/bridge')
    app.register_blueprint(widget_bp, url_prefix='/widget')
    logger.info("✅ Bridge and widget blueprints registered")

    return app

if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.environ.get('PORT', 8000)), debug=default_settings.DEBUG)
