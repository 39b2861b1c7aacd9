from __future__ import annotations

import json
from pathlib import Path

from fastapi.openapi.utils import get_openapi

from app.api.main import app
from app.core.config import settings


def main() -> None:
    spec = get_openapi(
        title=app.title,
        version=settings.APP_VERSION,
        description="Inventory management REST API",
        routes=app.routes,
    )
    target = Path(__file__).resolve().parents[1] / "docs" / "openapi.json"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(spec, indent=2))
    print(f"OpenAPI spec written to {target}")


if __name__ == "__main__":
    main()
