"""
Локальне сховище ключ-значення.
One JSON file per key under the data directory; keys may contain '/' to
group files per user.
"""

import json
import os
from typing import Any, List, Optional

LOCAL_DATA_DIR = 'family_tree_data'


class PersistenceService:
    def __init__(self, data_dir: str = LOCAL_DATA_DIR):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        parts = [p for p in key.split('/') if p not in ('', '.', '..')]
        if not parts:
            raise KeyError(key)
        return os.path.join(self.data_dir, *parts)

    def exists(self, key: str) -> bool:
        return os.path.exists(self._path(key))

    def get(self, key: str) -> Optional[Any]:
        """Decoded value, or None when the key was never written."""
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def set(self, key: str, value: Any):
        path = self._path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        tmp_path = path + '.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(value, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

    def keys(self) -> List[str]:
        found = []
        for folder, _, files in os.walk(self.data_dir):
            for name in files:
                if name.endswith('.tmp'):
                    continue
                rel = os.path.relpath(os.path.join(folder, name), self.data_dir)
                found.append(rel.replace(os.sep, '/'))
        return sorted(found)
