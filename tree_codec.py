"""
Serialization of the forest to the nested member-record format.
Ids are identity: a member met twice is written once in full and then as a
stub, and records sharing an id are merged back into one member on load.
"""

from typing import List, Set

from family_graph import GENDERS, REL_CHILD, REL_PARENT, REL_PARTNER, FamilyGraph, Member

FORMAT_VERSION = 2
RELATION_FIELDS = (('spouses', REL_PARTNER), ('children', REL_CHILD), ('parents', REL_PARENT))


class TreeFormatError(ValueError):
    pass


# ==================== ЗАПИС ====================

def serialize_tree(member: Member, seen: Set[str] = None) -> dict:
    if seen is None:
        seen = set()
    record = {'id': member.id, 'name': member.name, 'gender': member.gender,
              'spouses': [], 'children': [], 'parents': []}
    if member.id in seen:
        return record
    seen.add(member.id)
    record['spouses'] = [serialize_tree(m, seen) for m in member.spouses]
    record['children'] = [serialize_tree(m, seen) for m in member.children]
    record['parents'] = [serialize_tree(m, seen) for m in member.parents]
    return record


def serialize_forest(tree: FamilyGraph) -> dict:
    seen = set()
    return {'version': FORMAT_VERSION,
            'roots': [serialize_tree(root, seen) for root in tree.root_members()]}


# ==================== ЧИТАННЯ ====================

def deserialize(data) -> FamilyGraph:
    """
    Builds a new forest from a forest document or a bare member record.
    Raises TreeFormatError and builds nothing on malformed input.
    """
    if isinstance(data, dict) and 'roots' in data:
        records = data['roots']
        if not isinstance(records, list):
            raise TreeFormatError("'roots' must be a list")
    else:
        records = [data]

    tree = FamilyGraph()
    parent_ids: List[str] = []
    for i, record in enumerate(records):
        root_id = _read(tree, record, f"roots[{i}]", parent_ids)
        if root_id not in tree.roots:
            tree.roots.append(root_id)

    for parent_id in parent_ids:
        if parent_id not in tree.roots:
            tree.roots.append(parent_id)
    return tree


def _read(tree: FamilyGraph, record, path: str, parent_ids: List[str]) -> str:
    _validate(record, path)
    member_id = record['id']
    if member_id not in tree:
        tree.create_member(record['name'], record['gender'], member_id)

    for field, rel in RELATION_FIELDS:
        for i, nested in enumerate(record.get(field, [])):
            other_id = _read(tree, nested, f"{path}.{field}[{i}]", parent_ids)
            tree.link(member_id, other_id, rel)
            if rel == REL_PARENT and other_id not in parent_ids:
                parent_ids.append(other_id)
    return member_id


def _validate(record, path: str):
    if not isinstance(record, dict):
        raise TreeFormatError(f"{path}: member record must be an object")
    for key in ('id', 'name', 'gender', 'spouses', 'children'):
        if key not in record:
            raise TreeFormatError(f"{path}: missing field '{key}'")
    if not isinstance(record['id'], str) or not record['id']:
        raise TreeFormatError(f"{path}: 'id' must be a non-empty string")
    if not isinstance(record['name'], str):
        raise TreeFormatError(f"{path}: 'name' must be a string")
    if record['gender'] not in GENDERS:
        raise TreeFormatError(f"{path}: unknown gender {record['gender']!r}")
    for key in ('spouses', 'children', 'parents'):
        if not isinstance(record.get(key, []), list):
            raise TreeFormatError(f"{path}: '{key}' must be a list")
