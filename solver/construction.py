"""Eröffnungsheuristik: platziert jede offene Lesson einmal, in Eingabe-Reihenfolge.

Für jede Lesson werden alle (Zeitslot, Raum)-Paare bewertet; der Zug mit
dem besten Score-Delta gewinnt, bei Gleichstand der zuerst gesehene.
Bereits platzierte Lessons werden nicht mehr angefasst.
"""

import logging
from typing import Optional

from models.score import HardSoftScore
from solver.moves import ChangeMove, placement_moves
from solver.scope import SolverScope

logger = logging.getLogger(__name__)


class ConstructionHeuristicPhase:
    """First Fit mit vollständigem Lookahead pro Lesson."""

    def solve(self, scope: SolverScope) -> None:
        director = scope.score_director
        timetable = director.timetable
        pending = [l for l in timetable.lessons if not l.pinned and not l.is_initialized]

        logger.info(
            f"Eröffnungsheuristik gestartet: {len(pending)} offene Lessons | "
            f"Score: {director.score}"
        )

        placed = 0
        for lesson in pending:
            if scope.is_terminated():
                logger.warning(
                    f"Eröffnungsheuristik abgebrochen: {len(pending) - placed} "
                    f"Lessons bleiben offen"
                )
                break

            best_move: Optional[ChangeMove] = None
            best_delta: Optional[HardSoftScore] = None
            for move in placement_moves(timetable, lesson):
                delta = director.score_delta(move)
                if best_delta is None or delta > best_delta:
                    best_move, best_delta = move, delta

            if best_move is None:
                continue
            director.do_move(best_move)
            scope.step_count += 1
            placed += 1
            logger.debug(f"  Schritt {scope.step_count}: {best_move} | Score: {director.score}")

        if director.score > scope.best_score:
            scope.update_best()

        logger.info(
            f"Eröffnungsheuristik beendet: {placed} Lessons platziert | "
            f"Zeit: {scope.elapsed:.2f}s | Score: {director.score}"
        )
