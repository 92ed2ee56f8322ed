"""
FlatCMS
A Flask-based content manager for flat text, markdown and image files.
"""

from flask import Flask, redirect, render_template, url_for
from pathlib import Path
from werkzeug.exceptions import RequestEntityTooLarge
import logging

from flatcms.core.config import load_config
from flatcms.core.context import current_context
from flatcms.core.credentials import CredentialStore
from flatcms.core.errors import NotFoundError
from flatcms.core.logging_config import setup_logging
from flatcms.core.store import DocumentStore
from flatcms.version_info import __version__ as VERSION
from flatcms.views.auth import auth_bp
from flatcms.views.documents import documents_bp

logger = logging.getLogger(__name__)


def create_app(overrides=None, config_path=None) -> Flask:
    """Build the application. ``overrides`` win over file and env config."""
    config = load_config(overrides, config_path)

    app = Flask(__name__)
    app.config.update(config)

    if app.config.get('LOG_DIR'):
        setup_logging(Path(app.config['LOG_DIR']), app.config.get('DEBUG', False))
    logger.info(f"Application starting - Version {VERSION}")

    app.extensions['flatcms'] = {
        'store': DocumentStore(app.config['DATA_DIR']),
        'credentials': CredentialStore(app.config['CREDENTIALS_FILE']),
    }
    logger.info(f"Data directory: {app.config['DATA_DIR']}")
    logger.info(f"Credentials file: {app.config['CREDENTIALS_FILE']}")

    app.register_blueprint(auth_bp)
    app.register_blueprint(documents_bp)

    @app.context_processor
    def inject_global_context():
        return {
            'version': VERSION,
            'current_user': current_context().user,
        }

    @app.errorhandler(NotFoundError)
    def document_not_found(error):
        logger.warning(f"Missing document requested: {error.name!r}")
        current_context().error(error.message)
        return redirect(url_for('documents.index'))

    @app.errorhandler(RequestEntityTooLarge)
    def upload_too_large(error):
        limit_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
        logger.warning(f"Upload over the {limit_mb} MB limit rejected")
        return render_template('upload.html', error=f"File too large (max {limit_mb} MB)"), 413

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"500 Error: {error}", exc_info=True)
        return "Internal Server Error", 500

    return app
