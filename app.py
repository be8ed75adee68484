"""
StudyKit server entry point.

    python app.py            # development server
    <wsgi server> app:app    # production
"""
import os

from dotenv import load_dotenv

load_dotenv()

from studykit import create_app  # noqa: E402

app = create_app()  # FLASK_ENV picks the config


if __name__ == "__main__":
    port = int(os.getenv("PORT", app.config.get("PORT", 5000)))
    app.logger.info("Server running on port %s", port)
    app.run(host="0.0.0.0", port=port, threaded=True)
