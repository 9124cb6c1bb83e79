"""
Модель сімейного графа.
Members are nodes of a networkx.DiGraph; spouse, child and parent links are
typed edges whose insertion order is the draw order.
"""

import uuid
from typing import Dict, Iterator, List, NamedTuple, Optional, Set

import networkx as nx

# Relationship type constants
REL_PARTNER = 'partner'
REL_CHILD = 'child'
REL_PARENT = 'parent'

GENDER_MALE = 'male'
GENDER_FEMALE = 'female'
GENDERS = (GENDER_MALE, GENDER_FEMALE)

MAX_PARENTS = 2

MSG_NOT_FOUND = "Member not found."
MSG_SPOUSE_NOT_MAIN = "Only members of the main line can gain spouses."
MSG_PARENT_ON_MAIN = "Parents can only be added to spouses, not to the main line."
MSG_TOO_MANY_PARENTS = "A member can have at most two parents."
MSG_BAD_GENDER = "Unknown gender."
MSG_EMPTY_NAME = "Name cannot be empty."


class EditResult(NamedTuple):
    ok: bool
    member: Optional['Member'] = None
    message: str = ""


class Member:
    """
    A view over one node of the family graph.
    Two views with the same id are the same member.
    """

    __slots__ = ('_tree', 'id')

    def __init__(self, tree: 'FamilyGraph', member_id: str):
        self._tree = tree
        self.id = member_id

    @property
    def name(self) -> str:
        return self._tree.graph.nodes[self.id]['name']

    @property
    def gender(self) -> str:
        return self._tree.graph.nodes[self.id]['gender']

    @property
    def spouses(self) -> List['Member']:
        return self._tree._related(self.id, REL_PARTNER)

    @property
    def children(self) -> List['Member']:
        return self._tree._related(self.id, REL_CHILD)

    @property
    def parents(self) -> List['Member']:
        return self._tree._related(self.id, REL_PARENT)

    def __eq__(self, other):
        if not isinstance(other, Member):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Member(id={self.id!r}, name={self.name!r})"


class FamilyGraph:
    """Ліс членів родини з індексом за id."""

    def __init__(self):
        self.graph = nx.DiGraph()
        self.roots: List[str] = []

    @classmethod
    def with_root(cls, name: str = "Root", gender: str = GENDER_MALE,
                  member_id: str = None) -> 'FamilyGraph':
        tree = cls()
        root = tree.create_member(name, gender, member_id)
        tree.roots.append(root.id)
        return tree

    # ==================== ДОСТУП ====================

    def __contains__(self, member_id) -> bool:
        return self.graph.has_node(member_id)

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def get(self, member_id: str) -> Optional[Member]:
        if not member_id or not self.graph.has_node(member_id):
            return None
        return Member(self, member_id)

    def members(self) -> Iterator[Member]:
        for node_id in self.graph.nodes():
            yield Member(self, node_id)

    def root_members(self) -> List[Member]:
        return [Member(self, r) for r in self.roots if self.graph.has_node(r)]

    def _related_ids(self, member_id: str, rel: str) -> List[str]:
        return [v for _, v, t in self.graph.out_edges(member_id, data='type') if t == rel]

    def _related(self, member_id: str, rel: str) -> List[Member]:
        return [Member(self, v) for v in self._related_ids(member_id, rel)]

    def create_member(self, name: str, gender: str, member_id: str = None) -> Member:
        """Adds a detached node. Callers link it."""
        member_id = member_id or uuid.uuid4().hex
        self.graph.add_node(member_id, name=name, gender=gender)
        return Member(self, member_id)

    def link(self, source_id: str, target_id: str, rel: str) -> bool:
        """Appends a typed edge unless the two members are already linked."""
        if self.graph.has_edge(source_id, target_id):
            return False
        self.graph.add_edge(source_id, target_id, type=rel)
        return True

    # ==================== КЛАСИФІКАЦІЯ ====================

    def _child_view(self):
        return nx.subgraph_view(
            self.graph,
            filter_edge=lambda u, v: self.graph[u][v].get('type') == REL_CHILD,
        )

    def main_ids(self) -> Set[str]:
        """Roots plus everything reachable from them along child edges only."""
        view = self._child_view()
        reachable = set()
        for root_id in self.roots:
            if not self.graph.has_node(root_id) or root_id in reachable:
                continue
            reachable.add(root_id)
            reachable.update(nx.descendants(view, root_id))
        return reachable - self.spouse_node_ids()

    def spouse_node_ids(self) -> Set[str]:
        return {v for _, v, t in self.graph.edges(data='type') if t == REL_PARTNER}

    def parent_node_ids(self) -> Set[str]:
        return {v for _, v, t in self.graph.edges(data='type') if t == REL_PARENT}

    def is_main(self, member_id: str) -> bool:
        return member_id in self.main_ids()

    def is_parent_node(self, member_id: str) -> bool:
        return member_id in self.parent_node_ids()

    def main_partner_of(self, spouse_id: str) -> Optional[Member]:
        """The main member whose spouse list holds spouse_id."""
        main = self.main_ids()
        for u, v, t in self.graph.edges(data='type'):
            if t == REL_PARTNER and v == spouse_id and u in main:
                return Member(self, u)
        return None

    def partner_owner_of(self, spouse_id: str) -> Optional[Member]:
        for u, v, t in self.graph.edges(data='type'):
            if t == REL_PARTNER and v == spouse_id:
                return Member(self, u)
        return None

    def child_of_parent(self, parent_id: str) -> Optional[Member]:
        """First member whose parents list contains parent_id."""
        for u, v, t in self.graph.edges(data='type'):
            if t == REL_PARENT and v == parent_id:
                return Member(self, u)
        return None

    def children_of(self, member: Member) -> List[Member]:
        """
        Children as seen by the couple: the first spouse of a main member
        reports the main member's children too.
        """
        own = member.children
        owner = self.partner_owner_of(member.id)
        if owner is None:
            return own
        spouses = self._related_ids(owner.id, REL_PARTNER)
        if not spouses or spouses[0] != member.id:
            return own
        shared = owner.children
        seen = {m.id for m in shared}
        return shared + [m for m in own if m.id not in seen]

    # ==================== РЕДАГУВАННЯ ====================

    def add_child(self, parent_id: str, name: str, gender: str,
                  member_id: str = None) -> EditResult:
        parent = self.get(parent_id)
        if parent is None:
            return EditResult(False, message=MSG_NOT_FOUND)
        if gender not in GENDERS:
            return EditResult(False, message=MSG_BAD_GENDER)

        owners = self._child_owners(parent)
        child = self.create_member(name, gender, member_id)
        for owner_id in owners:
            self.link(owner_id, child.id, REL_CHILD)
        return EditResult(True, child)

    def _child_owners(self, parent: Member) -> List[str]:
        # Parent-nodes take children only as a pairing
        if self.is_parent_node(parent.id):
            child = self.child_of_parent(parent.id)
            return self._related_ids(child.id, REL_PARENT)

        owner = self.partner_owner_of(parent.id)
        if owner is not None:
            spouses = self._related_ids(owner.id, REL_PARTNER)
            if spouses and spouses[0] == parent.id:
                return [owner.id]
        return [parent.id]

    def add_spouse(self, member_id: str, name: str, gender: str,
                   spouse_id: str = None) -> EditResult:
        member = self.get(member_id)
        if member is None:
            return EditResult(False, message=MSG_NOT_FOUND)
        if not self.is_main(member_id):
            return EditResult(False, member, MSG_SPOUSE_NOT_MAIN)
        if gender not in GENDERS:
            return EditResult(False, member, MSG_BAD_GENDER)

        spouse = self.create_member(name, gender, spouse_id)
        self.link(member_id, spouse.id, REL_PARTNER)
        return EditResult(True, spouse)

    def add_parent(self, child_id: str, name: str, gender: str,
                   parent_id: str = None) -> EditResult:
        child = self.get(child_id)
        if child is None:
            return EditResult(False, message=MSG_NOT_FOUND)
        if self.is_main(child_id):
            return EditResult(False, child, MSG_PARENT_ON_MAIN)
        if len(self._related_ids(child_id, REL_PARENT)) >= MAX_PARENTS:
            return EditResult(False, child, MSG_TOO_MANY_PARENTS)
        if gender not in GENDERS:
            return EditResult(False, child, MSG_BAD_GENDER)

        parent = self.create_member(name, gender, parent_id)
        self.roots.append(parent.id)
        self.link(child_id, parent.id, REL_PARENT)
        return EditResult(True, parent)

    def rename(self, member_id: str, name: str) -> EditResult:
        member = self.get(member_id)
        if member is None:
            return EditResult(False, message=MSG_NOT_FOUND)
        if not name or not name.strip():
            return EditResult(False, member, MSG_EMPTY_NAME)
        self.graph.nodes[member_id]['name'] = name
        return EditResult(True, member)

    def set_gender(self, member_id: str, gender: str) -> EditResult:
        member = self.get(member_id)
        if member is None:
            return EditResult(False, message=MSG_NOT_FOUND)
        if gender not in GENDERS:
            return EditResult(False, member, MSG_BAD_GENDER)
        self.graph.nodes[member_id]['gender'] = gender
        return EditResult(True, member)

    def summary(self) -> Dict[str, int]:
        return {
            'members': len(self),
            'roots': len(self.roots),
            'couples': len(self.spouse_node_ids()),
        }
