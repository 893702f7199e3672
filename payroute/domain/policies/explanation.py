"""ExplanationPolicy — why the winner won, in one readable string."""

from __future__ import annotations

from typing import Sequence

from payroute.domain.entities.selection import ScoredCandidate, SelectionAttempt
from payroute.domain.value_objects.enums import ADJUSTMENT_FACTORS

# Score gap above which the winner is called a clear winner
CLEAR_WIN_MARGIN = 15
TOP_FACTOR_COUNT = 3


def build_selection_explanation(
    selected: ScoredCandidate,
    ranked: Sequence[ScoredCandidate],
    attempts: Sequence[SelectionAttempt],
) -> str:
    """Compare the winner with the runner-up, list its strongest factors and
    name every candidate skipped by real-time validation."""
    parts = [f"Selected {selected.candidate_name} with score {selected.score}/100."]

    runner_up = next((s for s in ranked if s.candidate_id != selected.candidate_id), None)
    if runner_up is not None:
        gap = selected.score - runner_up.score
        versus = f"{runner_up.candidate_name} ({runner_up.score})"
        if gap > CLEAR_WIN_MARGIN:
            parts.append(f"Clear winner, {gap}pts ahead of {versus}.")
        elif gap > 0:
            parts.append(f"Close race, only {gap}pts ahead of {versus}.")
        else:
            parts.append(f"Won by weighted draw over {versus}.")

    top = sorted(
        (f for f in selected.factors if f.factor not in ADJUSTMENT_FACTORS),
        key=lambda f: f.points,
        reverse=True,
    )[:TOP_FACTOR_COUNT]
    if top:
        parts.append(f"Top factors: {' | '.join(f.reason for f in top)}")

    skipped = [a for a in attempts if not a.valid]
    if skipped:
        parts.append(
            "Skipped: " + ", ".join(f"{a.candidate_name} ({a.reason})" for a in skipped)
        )

    return " ".join(parts)
