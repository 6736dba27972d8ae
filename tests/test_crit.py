"""
Testy dla rzutów na crit i deterministycznego RNG.

Testuje:
- Skrajne szanse (0% / 100%)
- Crit streak
- Crit rate
- Powtarzalność dla seeda
"""

import pytest

from dpssim.combat.crit import CritTracker
from dpssim.core.rng import GameRNG


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def tracker():
    """Tracker z deterministycznym RNG."""
    return CritTracker(rng=GameRNG(seed=12345))


# ═══════════════════════════════════════════════════════════════════════════
# TEST: RZUTY
# ═══════════════════════════════════════════════════════════════════════════

def test_full_chance_always_crits(tracker):
    assert all(tracker.roll_crit(1.0) for _ in range(200))
    assert tracker.crit_rate == 1.0


def test_zero_chance_never_crits(tracker):
    assert not any(tracker.roll_crit(0.0) for _ in range(200))
    assert tracker.total_attacks == 200
    assert tracker.total_crits == 0


def test_streak_counts_consecutive_crits(tracker):
    for _ in range(3):
        tracker.roll_crit(1.0)
    assert tracker.crit_streak == 3
    assert tracker.last_attack_crit


def test_streak_resets_after_non_crit(tracker):
    """Jeden nie-crit zeruje streak."""
    tracker.roll_crit(1.0)
    tracker.roll_crit(1.0)
    tracker.roll_crit(0.0)
    assert tracker.crit_streak == 0
    assert not tracker.last_attack_crit


def test_crit_rate_without_rolls_is_zero():
    assert CritTracker(rng=GameRNG(1)).crit_rate == 0.0


def test_crit_rate_counts_rolls(tracker):
    tracker.roll_crit(1.0)
    tracker.roll_crit(0.0)
    tracker.roll_crit(1.0)
    tracker.roll_crit(0.0)
    assert tracker.crit_rate == pytest.approx(0.5)


def test_reset_clears_counters(tracker):
    tracker.roll_crit(1.0)
    tracker.reset()
    assert (tracker.total_attacks, tracker.total_crits, tracker.crit_streak) == (0, 0, 0)


def test_crit_rate_close_to_chance():
    """Przy wielu rzutach crit rate zbliża się do szansy."""
    tracker = CritTracker(rng=GameRNG(seed=7))
    for _ in range(5000):
        tracker.roll_crit(0.25)
    assert tracker.crit_rate == pytest.approx(0.25, abs=0.03)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DETERMINIZM
# ═══════════════════════════════════════════════════════════════════════════

def test_same_seed_same_sequence():
    a = CritTracker(rng=GameRNG(seed=42))
    b = CritTracker(rng=GameRNG(seed=42))
    assert [a.roll_crit(0.5) for _ in range(50)] == [b.roll_crit(0.5) for _ in range(50)]


def test_extreme_chances_do_not_consume_sample():
    """Rzut 100% i 0% nie pobiera próbki z RNG."""
    tracker = CritTracker(rng=GameRNG(seed=9))
    untouched = GameRNG(seed=9)

    assert tracker.roll_crit(1.0)
    assert not tracker.roll_crit(0.0)
    assert tracker.rng.random() == untouched.random()
    assert tracker.total_attacks == 2


def test_partial_chance_consumes_one_sample():
    tracker = CritTracker(rng=GameRNG(seed=9))
    reference = GameRNG(seed=9)

    tracker.roll_crit(0.3)
    reference.random()
    assert tracker.rng.random() == reference.random()


def test_rng_without_seed_remembers_seed():
    rng = GameRNG()
    replay = GameRNG(rng.seed)
    assert rng.random() == replay.random()


def test_rng_fork_is_deterministic():
    assert GameRNG(5).fork().seed == GameRNG(5).fork().seed
