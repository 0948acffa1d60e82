import json
import os
from typing import Any, Dict

import aiofiles

from .base_exporter import BaseExporter


class JSONExporter(BaseExporter):
    DEFAULT_FILENAME = "kubemeter-result.json"

    @staticmethod
    def dumps(data: Dict[str, Any]) -> str:
        return json.dumps(data or {}, ensure_ascii=False, indent=2)

    async def export(self, data: Dict[str, Any], path: str | None = None) -> str:
        out_path = path or self.DEFAULT_FILENAME
        # Ensure parent directory exists
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)

        async with aiofiles.open(out_path, "w", encoding="utf-8") as fh:
            await fh.write(self.dumps(data))
        return out_path
