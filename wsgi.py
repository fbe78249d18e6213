import os

# Force production env if nothing else says otherwise
os.environ.setdefault("LIFT_ENV", "production")

from lift import create_app  # noqa: E402

app = create_app()
