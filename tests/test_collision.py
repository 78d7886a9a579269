"""Tests for player/ghost contact detection."""

from maze_chase.collision import CollisionDetector, find_touched_ghosts, rects_overlap
from maze_chase.entities import Entity, Ghost, Position


class TestRectsOverlap:
    """AABB test on cell footprints."""

    def test_identical_rects_overlap(self):
        assert rects_overlap((5, 5, 2, 2), (5, 5, 2, 2))

    def test_contained_rect_overlaps(self):
        assert rects_overlap((5, 5, 2, 2), (6, 6, 1, 1))

    def test_shared_edge_is_not_overlap(self):
        assert not rects_overlap((5, 5, 2, 2), (7, 5, 1, 1))
        assert not rects_overlap((5, 5, 2, 2), (5, 7, 2, 2))

    def test_diagonal_corner_is_not_overlap(self):
        assert not rects_overlap((0, 0, 1, 1), (1, 1, 1, 1))


class TestFindTouchedGhosts:
    """Only active, uneaten ghosts can be touched."""

    def test_touched_active_ghost_is_reported(self):
        player = Entity("p1", Position(5, 5), width=2, height=2)
        ghosts = [
            Ghost("g1", Position(5, 5), is_active=True),
            Ghost("g2", Position(12, 2), is_active=True),
        ]
        assert find_touched_ghosts(player, ghosts) == [0]

    def test_inactive_and_eaten_ghosts_are_ignored(self):
        player = Entity("p1", Position(5, 5), width=2, height=2)
        ghosts = [
            Ghost("g1", Position(5, 5), is_active=False),
            Ghost("g2", Position(6, 6), is_active=False, is_eaten=True),
            Ghost("g3", Position(6, 5), is_active=True),
        ]
        assert find_touched_ghosts(player, ghosts) == [2]

    def test_custom_detector_is_used(self):
        class NeverCollide(CollisionDetector):
            def collides(self, entity1, entity2):
                return False

        player = Entity("p1", Position(5, 5))
        ghosts = [Ghost("g1", Position(5, 5), is_active=True)]
        assert find_touched_ghosts(player, ghosts, NeverCollide()) == []
