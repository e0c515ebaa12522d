# run.py
import logging
import os

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(dotenv_path=os.path.join(basedir, ".env"))

from app import create_app  # noqa: E402
from app.db import db  # noqa: E402

logger = logging.getLogger("run")

app = create_app()

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = app.config["PORT"]
    logger.info("Server running at http://localhost:%s", port)
    try:
        app.run(host=host, port=port, debug=app.config.get("DEBUG", False))
    finally:
        with app.app_context():
            db.engine.dispose()
