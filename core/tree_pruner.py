#!/usr/bin/env python3
"""
Tree Pruner Module
Removes or flattens wrapper groups that carry nothing but structure.
"""

from dataclasses import replace

from core.scene_data import NodeKind
from core.scene_tree import TreeNode
from core.transforms import compose


class TreePruner:
    """Bottom-up pruning of the intermediate tree

    A group is a candidate when keep_groups is off and it has no referenced
    entity, is no animation target, is visible and carries no user data.
    A candidate with no children is dropped; one with a single child is
    replaced by that child with the group's transform folded in. Groups with
    several children are kept, and so is any fold that would not be exact or
    that targets an animated or bone child.

    The input tree is left untouched.
    """

    def __init__(self, keep_groups=False):
        self.keep_groups = keep_groups
        self.pruned_count = 0

    def prune(self, root: TreeNode) -> TreeNode:
        """Prune below the scene root; the root itself always survives"""
        self.pruned_count = 0
        return replace(root, children=self._prune_children(root))

    def _prune_children(self, node):
        children = []
        for child in node.children:
            pruned = self._prune(child)
            if pruned is not None:
                children.append(pruned)
        return children

    def _prune(self, node):
        # Bone subtrees are emitted as one primitive; leave them as they are
        if node.kind == NodeKind.BONE:
            return node

        pruned = replace(node, children=self._prune_children(node))
        if not self._is_candidate(pruned):
            return pruned

        if not pruned.children:
            self.pruned_count += 1
            return None

        if len(pruned.children) == 1:
            child = pruned.children[0]
            # Animated and bone children own their local transform at runtime
            if child.animation_target or child.kind == NodeKind.BONE:
                return pruned
            folded = compose(pruned.transform, child.transform)
            if folded is not None:
                self.pruned_count += 1
                translation, rotation, scale = folded
                return replace(child, translation=translation, rotation=rotation, scale=scale)

        return pruned

    def _is_candidate(self, node):
        return (
            not self.keep_groups
            and node.kind == NodeKind.GROUP
            and not node.has_entity
            and not node.animation_target
            and node.visible
            and not node.user_data
        )
