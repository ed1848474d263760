"""
Configuration and Flask application initialization.
This module handles app setup, logging and the display timezone.
"""
import os
import logging
from dotenv import load_dotenv
from flask import Flask
from pytz import timezone

# Load environment variables
load_dotenv()

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
)
logger = logging.getLogger(__name__)

# Timezone
IST_TIMEZONE = 'Asia/Kolkata'
ist = timezone(IST_TIMEZONE)

# Initialize Flask app
application = Flask(__name__)
application.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'change-me-in-production')
application.config['DISPLAY_TIMEZONE'] = IST_TIMEZONE

IS_PRODUCTION = os.getenv('FLASK_ENV') == 'production'
application.config['TEMPLATES_AUTO_RELOAD'] = not IS_PRODUCTION

logger.debug("Flask application configured (production=%s, timezone=%s)", IS_PRODUCTION, IST_TIMEZONE)
