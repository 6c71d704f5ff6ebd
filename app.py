import logging
import secrets
from decimal import Decimal

from flask import Flask, jsonify
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from config import Config
from errors import ApiError
from models import db
from routes.analytics import analytics_bp
from routes.auth import auth_bp
from routes.chat import chat_bp
from routes.transactions import transactions_bp
from storage import Storage

logger = logging.getLogger(__name__)


class DecimalJSONProvider(DefaultJSONProvider):
    """Reads JSON numbers with a fraction as Decimal so amounts never pass through float."""

    def loads(self, s, **kwargs):
        kwargs.setdefault('parse_float', Decimal)
        return super().loads(s, **kwargs)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        logger.exception("Unhandled error")
        return jsonify({'message': 'Internal server error'}), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    logging.basicConfig(
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    # basicConfig only takes effect once per process; the level follows each app's config.
    logging.getLogger().setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    app.json = DecimalJSONProvider(app)
    config_class.init_db(app)
    app.storage = Storage(db)

    app.register_blueprint(auth_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(chat_bp)
    register_error_handlers(app)

    return app


app = create_app()

if __name__ == '__main__':
    app.run()
