from typing import Optional

from flask import Flask, jsonify
from invitegate.config import Settings
from invitegate.db import init_db
from invitegate.exceptions import ServiceException
from invitegate.middleware.auth import verify_session
from invitegate.routes.auth import auth_bp
from invitegate.routes.invite import invite_bp
from invitegate.routes.subscribe import mailing_list_bp, subscribe_bp
from invitegate.services.auth_service import AuthService
from invitegate.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config['DEBUG'] = settings.debug
    app.config['SETTINGS'] = settings
    init_db(app, settings)
    app.extensions['auth_service'] = AuthService(settings)

    app.before_request(verify_session)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(invite_bp, url_prefix='/invites')
    app.register_blueprint(subscribe_bp, url_prefix='/subscribe')
    app.register_blueprint(mailing_list_bp, url_prefix='/mailing-list')

    @app.route('/health', methods=['GET'], endpoint='health')
    def health():
        return jsonify({'status': 'ok'}), 200

    # Global error handler for ServiceException
    @app.errorhandler(ServiceException)
    def handle_service_exception(error):
        response = {
            'error': True,
            'message': str(error),
            'error_code': error.error_code,
            'status_code': error.status_code
        }
        return jsonify(response), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'message': 'Not found'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def handle_internal_error(error):
        logger.error("Unhandled error: %s", getattr(error, 'original_exception', error))
        return jsonify({'message': 'Internal server error'}), 500

    logger.info("App created (env=%s, debug=%s)", settings.app_env, settings.debug)
    return app
