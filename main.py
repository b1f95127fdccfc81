"""
main.py

Development entry point for the yt-dlp extraction service.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, yt-dlp
  - System: the yt-dlp executable on PATH (installed with the yt-dlp package)

Notes:
  - Endpoints are served under /api with Swagger docs at /api/docs
  - For production run the ``app`` object under a WSGI server
"""

import os

from app_factory import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 3000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    app.run(host=host, port=port, debug=debug)
