"""
Data Manager for the family graph.
Wraps edit operations with activity logging and loads/saves the forest
through the key-value store. Supports one forest per user.
"""

import os

from family_graph import GENDER_MALE, EditResult, FamilyGraph
from tree_codec import TreeFormatError, deserialize, serialize_forest
from utils.logger_service import LoggerService
from utils.persistence_service import LOCAL_DATA_DIR, PersistenceService


class DataManager:
    def __init__(self, username: str, data_dir: str = LOCAL_DATA_DIR):
        self.username = username
        self.tree = FamilyGraph.with_root()
        self.store = PersistenceService(data_dir)
        self.logger = LoggerService(os.path.join(data_dir, "activity_log.csv"), user=username)
        self.project_key = f"{self.username}/family.tree"

    def load_project(self) -> bool:
        """Replaces the forest wholesale; on any failure the current one stays."""
        try:
            data = self.store.get(self.project_key)
        except (OSError, ValueError) as e:
            print(f"Error loading project: {e}")
            self.logger.log("LOAD_FAILED", str(e))
            return False
        if data is None:
            return True

        try:
            tree = deserialize(data)
        except TreeFormatError as e:
            print(f"Error loading project: {e}")
            self.logger.log("LOAD_FAILED", str(e))
            return False

        self.tree = tree
        self.logger.log("LOAD", f"Loaded {len(tree)} members")
        return True

    def save_project(self) -> bool:
        try:
            self.store.set(self.project_key, serialize_forest(self.tree))
            return True
        except (OSError, TypeError) as e:
            print(f"Error saving project: {e}")
            return False

    def _logged(self, action: str, result: EditResult, details: str) -> EditResult:
        if result.ok:
            self.logger.log(action, details)
        return result

    def add_child(self, parent_id: str, name: str, gender: str = GENDER_MALE) -> EditResult:
        result = self.tree.add_child(parent_id, name, gender)
        return self._logged("ADD_CHILD", result, f"{name} (ID: {result.member.id if result.ok else '-'}) under {parent_id}")

    def add_spouse(self, member_id: str, name: str, gender: str = GENDER_MALE) -> EditResult:
        result = self.tree.add_spouse(member_id, name, gender)
        return self._logged("ADD_SPOUSE", result, f"{name} (ID: {result.member.id if result.ok else '-'}) to {member_id}")

    def add_parent(self, child_id: str, name: str, gender: str = GENDER_MALE) -> EditResult:
        result = self.tree.add_parent(child_id, name, gender)
        return self._logged("ADD_PARENT", result, f"{name} (ID: {result.member.id if result.ok else '-'}) of {child_id}")

    def rename(self, member_id: str, name: str) -> EditResult:
        member = self.tree.get(member_id)
        old_name = member.name if member else None
        result = self.tree.rename(member_id, name)
        return self._logged("UPDATE_PERSON", result, f"ID {member_id}: Name: {old_name} -> {name}")

    def set_gender(self, member_id: str, gender: str) -> EditResult:
        result = self.tree.set_gender(member_id, gender)
        return self._logged("UPDATE_PERSON", result, f"ID {member_id}: Gender -> {gender}")

    def get_all_people(self) -> list:
        return [(m.id, m.name) for m in self.tree.members()]

    def create_test_data(self):
        self.tree = FamilyGraph.with_root("Adam")
        adam = self.tree.roots[0]
        eve = self.add_spouse(adam, "Eve", "female").member
        for name in ("Cain", "Abel"):
            self.add_child(adam, name)
        seth = self.add_child(eve.id, "Seth").member
        azura = self.add_spouse(seth.id, "Azura", "female").member
        self.add_child(seth.id, "Enosh")
        self.add_parent(azura.id, "Ada", "female")
        self.add_parent(azura.id, "Lamech")
        self.save_project()
