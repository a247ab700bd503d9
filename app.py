# app.py – thin bootstrap, all logic lives in webapp package

import logging

from dotenv import load_dotenv

# Load .env BEFORE importing/creating the Flask app (config reads the env at import)
load_dotenv()

from webapp import create_app  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# This is the app object Flask sees when you run `python app.py`
app = create_app()

if __name__ == "__main__":
    # For local dev you can tweak debug/port here
    app.run(debug=True, port=5001)
