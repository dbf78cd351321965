"""
Unit tests for deterministic encouragement selection.
"""

from eventscale.services.public_gateway import ENCOURAGEMENTS, select_encouragement


class TestSelectEncouragement:
    def test_same_seed_same_text(self):
        assert select_encouragement('tok-abc') == select_encouragement('tok-abc')

    def test_result_is_from_fixed_list(self):
        for seed in ('a', 'b', 'c', 'tok-123', ''):
            assert select_encouragement(seed) in ENCOURAGEMENTS

    def test_seeds_spread_over_list(self):
        picked = {select_encouragement(f'token-{n}') for n in range(200)}
        assert len(picked) > 1
