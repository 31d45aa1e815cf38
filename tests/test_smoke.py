import random

from spook_ai.runtime.arena import spawn_connected_random_walk_shapes


def test_import_package():
    import spook_ai

    assert spook_ai.__version__


def test_square_shape_generation():
    starts = [(0, 0), (10, 10), (20, 20)]

    def sample_start():
        return starts.pop(0) if starts else None

    def neighbors(tile):
        x, y = tile
        return [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]

    def valid(candidate, pending):
        return candidate not in pending

    shapes = spawn_connected_random_walk_shapes(
        shape_count=3,
        min_sections=2,
        max_sections=3,
        sample_start_fn=sample_start,
        neighbor_candidates_fn=neighbors,
        is_candidate_valid_fn=valid,
        rng=random.Random(7),
    )

    assert len(shapes) == 3
    assert all(2 <= len(shape) <= 3 for shape in shapes)


def test_shape_generation_skips_missing_starts():
    shapes = spawn_connected_random_walk_shapes(
        shape_count=2,
        min_sections=2,
        max_sections=2,
        sample_start_fn=lambda: None,
        neighbor_candidates_fn=lambda tile: [],
        is_candidate_valid_fn=lambda candidate, pending: True,
    )

    assert shapes == []


def test_run_context_line(caplog):
    from spook_ai.logging_utils import log_run_context

    with caplog.at_level("INFO", logger="spook_ai.run"):
        log_run_context("run-area", {"episodes": 3, "normalize": False, "skipped": None})

    assert caplog.messages == ["Run Area\tEpisodes: 3\tNormalize: off"]
