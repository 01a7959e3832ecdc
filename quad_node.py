'''
# ------------------------------------------------------------------------
#
#   Quad Node
#
#   One quadrant of a square binary image. A node is either a leaf holding
#   a single color for its whole region, or an internal node that owns
#   exactly four children, one per quadrant.
#
#   Quadrants follow Cartesian conventions, with row 0 at the top:
#
#       +------+------+
#       |  q2  |  q1  |
#       +------+------+
#       |  q3  |  q4  |
#       +------+------+
#
#   Nodes never keep a reference to their parent. Anything that needs the
#   position of a node (offsets, depth) is passed down while traversing.
#
# -------------------------------------------------------------------------
'''

from enum import Enum
from typing import NamedTuple, Optional, Sequence, Tuple, Union


class ColorValue(Enum):
    """Nodes can represent black or white quadrants, or Mixed ones that were split"""
    Black = 'Black'
    White = 'White'
    Mixed = 'Mixed'


class NodeState(Enum):
    EMPTY = 'Empty'
    INITIALIZED = 'Initialized'


class Children(NamedTuple):
    """Quadrant children of a node, split following Cartesian Coordinate conventions"""
    q1: 'QuadNode'  # Upper-right (NE)
    q2: 'QuadNode'  # Upper-left (NW)
    q3: 'QuadNode'  # Lower-left (SW)
    q4: 'QuadNode'  # Lower-right (SE)


# ==================== Quadtree Classes ====================

class QuadNode:
    """Represents a single quadrant in the quadtree structure"""
    def __init__(self, side_length: Optional[int] = None, color: ColorValue = ColorValue.Mixed):
        """
        Create a node

        QuadNode() creates an uninitialized node, which has to be configured
        via init() before it can be inserted into a tree. QuadNode(side_length, color)
        creates a leaf that is ready to be inserted.

        Args:
            side_length: Length of this quadrant's sides in pixels
            color: This quadrant's color, only meaningful if this is a leaf
        """
        self._state = NodeState.EMPTY
        self._side_length = 0
        self._color = ColorValue.Mixed
        self._children: Tuple['QuadNode', ...] = ()
        self._owned = False

        if side_length is not None:
            self.init(side_length, color)

    @staticmethod
    def from_sample(sample) -> ColorValue:
        """Map a pixel sample to its color: set is black, cleared is white"""
        return ColorValue.Black if bool(sample) else ColorValue.White

    def init(self, side_length: int, color: ColorValue):
        """
        Initialize this node, as if it had been constructed with a side length.

        Existing children are kept. Calling init() again simply overwrites
        the side length and color.
        """
        self._side_length = int(side_length)
        self._color = ColorValue(color)
        self._state = NodeState.INITIALIZED

    @property
    def side_length(self) -> int:
        return self._side_length

    @property
    def color(self) -> ColorValue:
        return self._color

    def get_side_length(self) -> int:
        """Returns the length of this quad's sides"""
        return self._side_length

    def get_color_value(self) -> ColorValue:
        """Returns the color of this node (Mixed for uninitialized or split nodes)"""
        return self._color

    def is_initialized(self) -> bool:
        return self._state is NodeState.INITIALIZED

    def is_leaf(self) -> bool:
        """Check if this is a leaf node (no children)"""
        return len(self._children) == 0

    def is_owned(self) -> bool:
        """True while this node is installed as the child of another node"""
        return self._owned

    def are_children_valid(self, children) -> bool:
        """Check a child set: four distinct, valid nodes, none of them this node"""
        if children is None or len(children) != 4:
            return False

        seen = set()
        for child in children:
            if not isinstance(child, QuadNode) or child is self:
                return False
            if id(child) in seen:
                return False
            seen.add(id(child))
            if not child.is_valid():
                return False

        return True

    def can_adopt(self, children) -> bool:
        """Check that no candidate already has a parent and none of them leads back to this node"""
        if children is None or len(children) != 4:
            return False

        stack = []
        for child in children:
            if not isinstance(child, QuadNode) or child._owned:
                return False
            stack.append(child)

        while stack:
            node = stack.pop()
            if node is self:
                return False
            stack.extend(node._children)

        return True

    def is_valid(self) -> bool:
        """A node is valid if it was initialized and is a leaf or has four valid children"""
        if not self.is_initialized():
            return False

        return self.is_leaf() or self.are_children_valid(self._children)

    def release_children(self):
        for child in self._children:
            child._owned = False
        self._children = ()

    def set_children(self, children: Union[Children, Sequence['QuadNode']]) -> bool:
        """
        Install four nodes as the children of this node, in q1..q4 order.

        Installing transfers ownership: a node that already has a parent, or
        that has this node below it, cannot be installed. The swap is all or
        nothing: if the candidates are not exactly four valid, unowned nodes,
        this node drops any children it had and stays a leaf.

        Returns:
            True if the children were installed, False otherwise
        """
        if not self.can_adopt(children) or not self.are_children_valid(children):
            self.release_children()
            return False

        self.release_children()
        self._children = Children(*children)
        for child in self._children:
            child._owned = True
        return True

    def get_children(self) -> Union[Children, Tuple[()]]:
        """Get a read-only snapshot of the children (empty if leaf)"""
        return self._children

    def __eq__(self, other):
        if not isinstance(other, QuadNode):
            return NotImplemented

        # Uninitialized nodes are only equal to each other
        if not self.is_initialized() or not other.is_initialized():
            return self.is_initialized() == other.is_initialized()

        if self._side_length != other._side_length or self._color != other._color:
            return False

        if self.is_leaf() or other.is_leaf():
            return self.is_leaf() and other.is_leaf()

        return all(mine == theirs for mine, theirs in zip(self._children, other._children))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        if not self.is_initialized():
            return 'QuadNode(<uninitialized>)'
        kind = 'leaf' if self.is_leaf() else 'internal'
        return f'QuadNode(side_length={self._side_length}, color={self._color.name}, {kind})'
