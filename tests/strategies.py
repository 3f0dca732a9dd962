"""Hypothesis strategies for Zeno path and prompt inputs."""

from hypothesis import strategies as st

_segment = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="_-."),
    min_size=1,
    max_size=12,
).filter(lambda s: s not in (".", ".."))

# Relative paths with at least one ".." segment, joined by either separator
traversal_paths = st.builds(
    lambda before, after, seps: "".join(
        part + sep for part, sep in zip(before + [".."] + after, seps)
    ).rstrip("/\\"),
    st.lists(_segment, max_size=3),
    st.lists(_segment, max_size=3),
    st.lists(st.sampled_from(["/", "\\"]), min_size=7, max_size=7),
)

# Answers the confirmation prompt does not accept
invalid_answers = st.text(max_size=5).filter(lambda s: s.strip() not in ("1", "2", "3"))
