"""Development entry point: ``python app.py`` or ``flask --app app run``."""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src" / "hr_system"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from hr_system.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config.get("DEBUG", False))
