# Root entry point so uvicorn can run from the repository root:
#   uvicorn main:app --host 0.0.0.0 --port 8000

from tkms.main import app  # noqa: F401
