"""
Hypothesis strategies for generating well-formed per-file patches.
"""

from hypothesis import strategies as st


CONTENT = st.text(alphabet=st.sampled_from(list("abcxyz =();{}+-@\\#")), max_size=20)
CHANGE = st.tuples(st.sampled_from([' ', '+', '-']), CONTENT)


@st.composite
def hunks(draw, old_start=None, new_start=None):
    """Draw a hunk as (old_start, new_start, [(prefix, content), ...])."""
    changes = draw(st.lists(CHANGE, min_size=1, max_size=15))
    if old_start is None:
        old_start = draw(st.integers(min_value=1, max_value=500))
    if new_start is None:
        new_start = draw(st.integers(min_value=1, max_value=500))
    return old_start, new_start, changes


@st.composite
def patches(draw):
    """Draw a multi-hunk patch whose hunks never overlap on either side."""
    count = draw(st.integers(min_value=1, max_value=4))
    old_cursor = draw(st.integers(min_value=1, max_value=50))
    new_cursor = draw(st.integers(min_value=1, max_value=50))
    drawn = []

    for _ in range(count):
        hunk = draw(hunks(old_start=old_cursor, new_start=new_cursor))
        drawn.append(hunk)
        _, _, changes = hunk
        gap = draw(st.integers(min_value=1, max_value=30))
        old_cursor += sum(1 for prefix, _ in changes if prefix != '+') + gap
        new_cursor += sum(1 for prefix, _ in changes if prefix != '-') + gap

    return drawn


def render_hunk(old_start, new_start, changes):
    old_count = sum(1 for prefix, _ in changes if prefix != '+')
    new_count = sum(1 for prefix, _ in changes if prefix != '-')
    lines = [f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"]
    lines.extend(prefix + content for prefix, content in changes)
    return "\n".join(lines)


def render_patch(drawn):
    return "\n".join(render_hunk(*hunk) for hunk in drawn)
