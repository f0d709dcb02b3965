"""Node model for parsed XML documents.

All nodes of one parse live in an XMLForest arena and are addressed by their
integer id (the arena index). Parent, child and sibling relations are stored
as ids, so the tree has no owning reference cycles; the navigation
properties on XMLNode resolve ids through the arena on access.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

TEXT_NODE_NAME = "#text"

NodePredicate = Callable[["XMLNode"], bool]


@dataclass(eq=False)
class XMLNode:
    """A single element or text node.

    Text nodes use the reserved name "#text" and carry their verbatim source
    slice in text_content; elements leave text_content empty.
    """

    forest: "XMLForest" = field(repr=False)
    id: int
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    is_self_closing: bool = False
    text_content: str = ""

    parent_id: Optional[int] = None
    prev_sibling_id: Optional[int] = None
    next_sibling_id: Optional[int] = None
    child_ids: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate node values."""
        if not self.name:
            raise ValueError("Node name cannot be empty")
        if self.id < 0:
            raise ValueError("Node id must be >= 0")

    @property
    def is_text(self) -> bool:
        """Check if this is a text node."""
        return self.name == TEXT_NODE_NAME

    @property
    def parent(self) -> Optional["XMLNode"]:
        return self.forest.get(self.parent_id)

    @property
    def prev_sibling(self) -> Optional["XMLNode"]:
        return self.forest.get(self.prev_sibling_id)

    @property
    def next_sibling(self) -> Optional["XMLNode"]:
        return self.forest.get(self.next_sibling_id)

    @property
    def children(self) -> List["XMLNode"]:
        """Child nodes in document order."""
        return [self.forest.node(child_id) for child_id in self.child_ids]

    @property
    def first_child(self) -> Optional["XMLNode"]:
        return self.forest.node(self.child_ids[0]) if self.child_ids else None

    @property
    def last_child(self) -> Optional["XMLNode"]:
        return self.forest.node(self.child_ids[-1]) if self.child_ids else None

    @property
    def text(self) -> str:
        """Concatenated content of all descendant text nodes, untrimmed."""
        if self.is_text:
            return self.text_content
        return "".join(node.text_content for node in self.iter() if node.is_text)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        """Check if node has specific attribute."""
        return name in self.attributes

    def iter(self) -> Iterator["XMLNode"]:
        """Iterate over this node and its descendants in pre-order."""
        stack = [self.id]
        while stack:
            node = self.forest.node(stack.pop())
            yield node
            stack.extend(reversed(node.child_ids))

    def find_all(self, predicate: NodePredicate) -> List["XMLNode"]:
        """Find this node and all descendants matching predicate."""
        return find_all(self, predicate)

    def find_children(self, name: str) -> List["XMLNode"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def get_depth(self) -> int:
        """Get depth of this node in the tree (root = 0)."""
        depth = 0
        parent_id = self.parent_id
        while parent_id is not None:
            depth += 1
            parent_id = self.forest.node(parent_id).parent_id
        return depth

    def get_path(self) -> str:
        """Get XPath-like path to this node."""
        parts = []
        node: Optional[XMLNode] = self
        while node is not None:
            parent = node.parent
            step = "text()" if node.is_text else node.name
            if parent is not None:
                same_name = [c for c in parent.child_ids
                             if self.forest.node(c).name == node.name]
                if len(same_name) > 1:
                    step = f"{step}[{same_name.index(node.id) + 1}]"
            parts.append(step)
            node = parent
        return "/" + "/".join(reversed(parts))

    def _shallow_dict(self) -> Dict[str, Any]:
        if self.is_text:
            return {"name": self.name, "text": self.text_content}
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "self_closing": self.is_self_closing,
            "children": [],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert node and its subtree to dictionary representation."""
        result = self._shallow_dict()
        stack = [(self, result)]
        while stack:
            node, data = stack.pop()
            for child in node.children:
                child_data = child._shallow_dict()
                data["children"].append(child_data)
                stack.append((child, child_data))
        return result


class XMLForest:
    """Arena owning every node of one parse plus the ordered root list."""

    def __init__(self) -> None:
        self._nodes: List[XMLNode] = []
        self._root_ids: List[int] = []

    def __len__(self) -> int:
        return len(self._root_ids)

    def __iter__(self) -> Iterator[XMLNode]:
        return iter(self.roots)

    def __getitem__(self, index: int) -> XMLNode:
        return self._nodes[self._root_ids[index]]

    def __repr__(self) -> str:
        names = ", ".join(root.name for root in self.roots)
        return f"XMLForest(roots=[{names}], nodes={len(self._nodes)})"

    @property
    def roots(self) -> List[XMLNode]:
        """Top-level nodes in document order."""
        return [self._nodes[root_id] for root_id in self._root_ids]

    @property
    def node_count(self) -> int:
        """Number of nodes ever created in this arena."""
        return len(self._nodes)

    def node(self, node_id: int) -> XMLNode:
        """Look up a node by id.

        Raises:
            KeyError: If no node has this id
        """
        if not 0 <= node_id < len(self._nodes):
            raise KeyError(f"No node with id {node_id}")
        return self._nodes[node_id]

    def get(self, node_id: Optional[int]) -> Optional[XMLNode]:
        """Look up a node by id, returning None for a missing handle."""
        if node_id is None:
            return None
        return self.node(node_id)

    def create_element(
        self,
        name: str,
        attributes: Optional[Dict[str, str]] = None,
        is_self_closing: bool = False
    ) -> XMLNode:
        """Create a detached element node."""
        node = XMLNode(
            forest=self,
            id=len(self._nodes),
            name=name,
            attributes=attributes if attributes is not None else {},
            is_self_closing=is_self_closing,
        )
        self._nodes.append(node)
        return node

    def create_text(self, content: str) -> XMLNode:
        """Create a detached text node."""
        node = XMLNode(
            forest=self,
            id=len(self._nodes),
            name=TEXT_NODE_NAME,
            text_content=content,
        )
        self._nodes.append(node)
        return node

    def add_root(self, node: XMLNode) -> None:
        """Record a parentless node as the next forest root."""
        if node.parent_id is not None:
            raise ValueError("Root node cannot have a parent")
        self._root_ids.append(node.id)

    def append_child(self, parent: XMLNode, child: XMLNode) -> None:
        """Append child to parent and thread the sibling links."""
        if parent.is_self_closing or parent.is_text:
            raise ValueError(f"Node {parent.name!r} cannot have children")
        if child.parent_id is not None:
            raise ValueError("Child already has a parent")
        if parent.child_ids:
            last_child = self._nodes[parent.child_ids[-1]]
            last_child.next_sibling_id = child.id
            child.prev_sibling_id = last_child.id
        child.parent_id = parent.id
        parent.child_ids.append(child.id)

    def detach(self, node_id: int) -> bool:
        """Remove a node from its parent's children or from the root list.

        The neighbours' sibling links are joined around the removed node and
        the node's own parent and sibling links are cleared. The node and its
        subtree stay in the arena so existing handles remain valid.

        Returns:
            True if a node was removed, False if it was not attached
        """
        if not 0 <= node_id < len(self._nodes):
            return False
        node = self._nodes[node_id]

        if node.parent_id is None:
            if node_id in self._root_ids:
                self._root_ids.remove(node_id)
                return True
            return False

        siblings = self._nodes[node.parent_id].child_ids
        siblings.pop(siblings.index(node_id))

        prev_node = self.get(node.prev_sibling_id)
        next_node = self.get(node.next_sibling_id)
        if prev_node is not None:
            prev_node.next_sibling_id = node.next_sibling_id
        if next_node is not None:
            next_node.prev_sibling_id = node.prev_sibling_id

        node.parent_id = None
        node.prev_sibling_id = None
        node.next_sibling_id = None
        return True

    def iter_nodes(self) -> Iterator[XMLNode]:
        """Iterate over all attached nodes in document order."""
        for root in self.roots:
            yield from root.iter()

    def find_all(self, predicate: NodePredicate) -> List[XMLNode]:
        """Find all attached nodes matching predicate, in document order."""
        matches: List[XMLNode] = []
        for root in self.roots:
            matches.extend(find_all(root, predicate))
        return matches

    def to_dict(self) -> Dict[str, Any]:
        """Convert forest to dictionary representation."""
        return {"roots": [root.to_dict() for root in self.roots]}

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert forest to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def find_all(root: XMLNode, predicate: NodePredicate) -> List[XMLNode]:
    """Collect root and its descendants matching predicate in pre-order.

    Uses an explicit work stack, so very deep trees do not hit the
    interpreter's recursion limit.
    """
    return [node for node in root.iter() if predicate(node)]
