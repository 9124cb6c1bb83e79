"""
Avatar handles by gender. Only paths are handed out; nothing is read here.
"""

import os
from typing import Dict, Optional

from family_graph import GENDER_FEMALE, GENDER_MALE

ASSET_DIR = 'assets'
DEFAULT_AVATARS = {
    GENDER_MALE: 'avatar_male.png',
    GENDER_FEMALE: 'avatar_female.png',
}


class AvatarProvider:
    def __init__(self, asset_dir: str = ASSET_DIR, avatars: Dict[str, str] = None):
        self.asset_dir = asset_dir
        self.avatars = dict(DEFAULT_AVATARS if avatars is None else avatars)

    def avatar_for(self, gender: str) -> Optional[str]:
        filename = self.avatars.get(gender)
        if not filename:
            return None
        if filename.startswith(('http://', 'https://', 'data:')):
            return filename
        path = os.path.join(self.asset_dir, filename)
        return path if os.path.exists(path) else None
