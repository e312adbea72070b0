"""
Property-based tests for diff position resolution.

Property 3: Position round trip
"""

from hypothesis import given

from pr_diff_annotator.diff.position import PositionResolver
from pr_diff_annotator.models.review import Side

from diff_strategies import patches, render_patch


def expected_lines(drawn, side):
    """Yield (line number, raw patch line) for every line visible on one side."""
    for old_start, new_start, changes in drawn:
        old_line, new_line = old_start, new_start
        for prefix, content in changes:
            if prefix == '+':
                if side == Side.RIGHT:
                    yield new_line, prefix + content
                new_line += 1
            elif prefix == '-':
                if side == Side.LEFT:
                    yield old_line, prefix + content
                old_line += 1
            else:
                yield (new_line if side == Side.RIGHT else old_line), prefix + content
                old_line += 1
                new_line += 1


class TestPositionResolutionProperties:
    """Property tests for PositionResolver."""

    @given(drawn=patches())
    def test_right_side_round_trip(self, drawn):
        """
        Property: The position resolved for a new-file line points back at that
        line in the patch.
        """
        resolver = PositionResolver()
        patch = render_patch(drawn)

        for line_number, raw in expected_lines(drawn, Side.RIGHT):
            position = resolver.resolve(patch, line_number)
            assert position >= 1
            assert resolver.line_at_position(patch, position) == raw

    @given(drawn=patches())
    def test_left_side_round_trip(self, drawn):
        resolver = PositionResolver()
        patch = render_patch(drawn)

        for line_number, raw in expected_lines(drawn, Side.LEFT):
            position = resolver.resolve(patch, line_number, side=Side.LEFT)
            assert resolver.line_at_position(patch, position) == raw

    @given(drawn=patches())
    def test_position_map_covers_exactly_the_visible_lines(self, drawn):
        """
        Property: build_position_map has one key per line visible on the side,
        and positions increase with line numbers.
        """
        resolver = PositionResolver()
        patch = render_patch(drawn)

        mapping = resolver.build_position_map(patch)
        expected = [line for line, _ in expected_lines(drawn, Side.RIGHT)]

        assert sorted(mapping) == expected
        positions = [mapping[line] for line in expected]
        assert positions == sorted(positions)
        assert len(set(positions)) == len(positions)
