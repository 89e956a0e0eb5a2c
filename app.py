import os
import logging
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)


def create_app(config=None):
    """Application factory pattern"""
    app = Flask(__name__)
    app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    # Configure upload and analysis limits
    app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get("MAX_CONTENT_LENGTH_MB", "50")) * 1024 * 1024
    app.config['MAX_ANALYSIS_ROWS'] = int(os.environ.get("MAX_ANALYSIS_ROWS", "100000"))

    if config:
        app.config.update(config)

    # Register routes
    from routes import register_routes
    register_routes(app)

    logging.info(f"Analysis service ready (max rows: {app.config['MAX_ANALYSIS_ROWS']})")
    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.environ.get("PORT", "5000")), debug=True)
