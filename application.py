"""
Main application module.
Registers blueprints on the Flask application configured in config.py.
"""
import os
import logging

from config import application, IS_PRODUCTION
from routes.filters import filters_bp

logger = logging.getLogger(__name__)

# Register blueprints
application.register_blueprint(filters_bp)


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    logger.info("Starting application on port %s", port)
    application.run(host='0.0.0.0', port=port, debug=not IS_PRODUCTION)
