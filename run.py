# run.py
# This script launches the Flask application.
# Because the project is installed in editable mode via pyproject.toml,
# Python knows where to find the 'starbattle' package without any path manipulation.

import logging

from starbattle.app import app
from starbattle import constants as const

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format=const.LOG_FORMAT)
    # The 'debug=True' flag enables auto-reloading when package files are changed.
    app.run(host=const.API_HOST, port=const.API_PORT, debug=True)
