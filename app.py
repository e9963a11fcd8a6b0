"""Development entry point: ``python app.py``.

Settings come from ``APP_ENV`` (see ``config/``); a ``.env`` file is honored.
"""
from src.hr_records.hr_records.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=bool(app.config.get("DEBUG", False)))
