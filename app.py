"""Run the JSON API backend: ``python app.py`` (PORT defaults to 3000)."""

import os

from src.cardhub.cardhub.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3000")), debug=app.config["DEBUG"])
