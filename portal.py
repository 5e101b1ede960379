"""Run the company portal and public card pages: ``python portal.py`` (PORTAL_PORT defaults to 5000)."""

import os

from src.cardhub.cardhub.main import create_portal_app

app = create_portal_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORTAL_PORT", "5000")), debug=app.config["DEBUG"])
