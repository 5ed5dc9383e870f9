# config.py
import logging

# ------------------ Server ------------------

HOST = '0.0.0.0'
PORT = 3000

# seconds
IDLE_TIMEOUT = 120
READ_TIMEOUT = 1
WRITE_TIMEOUT = 1
SHUTDOWN_TIMEOUT = 30

# ------------------ Logging ------------------

LOG_LEVEL = logging.INFO
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# ------------------ CORS (read by flask_cors) ------------------

CORS_ORIGINS = '*'
CORS_SEND_WILDCARD = True
CORS_METHODS = 'GET, POST, PUT, DELETE, OPTIONS'
CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization']
