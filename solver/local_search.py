"""Local Search: verbessert die Eröffnungslösung bis zur Abbruchbedingung.

Pro Iteration: Zug erzeugen → Score-Delta → Akzeptanz → ggf. festschreiben.
Der Arbeitsstand darf schlechter werden; zurückgegeben wird immer der beste
Snapshot (siehe SolverScope.update_best).
"""

import logging
from typing import Optional

from solver.acceptor import Acceptor
from solver.move_selector import RandomMoveSelector
from solver.scope import SolverScope

logger = logging.getLogger(__name__)


class LocalSearchPhase:
    def __init__(
        self,
        move_selector: RandomMoveSelector,
        acceptor: Acceptor,
        full_assert: bool = False,
        move_log: Optional[list] = None,
    ) -> None:
        self.move_selector = move_selector
        self.acceptor = acceptor
        self.full_assert = full_assert
        # Optional: akzeptierte Züge protokollieren (Reproduzierbarkeit prüfen)
        self.move_log = move_log

    def solve(self, scope: SolverScope) -> None:
        director = scope.score_director
        if not self.move_selector.has_moves:
            logger.info("Local Search übersprungen: keine beweglichen Lessons")
            return

        start_step = scope.step_count
        start_score = director.score
        accepted = 0
        self.acceptor.phase_started(director.score)
        logger.info(f"Local Search gestartet | Score: {start_score}")

        while not scope.is_terminated():
            scope.step_count += 1
            move = self.move_selector.generate()
            if not move.is_doable():
                continue

            current_score = director.score
            move_score = current_score + director.score_delta(move)
            if self.acceptor.is_accepted(
                move_score, current_score, scope.best_score, scope.step_gradient()
            ):
                if self.move_log is not None:
                    self.move_log.append(repr(move))
                director.do_move(move)
                accepted += 1
                if self.full_assert:
                    director.assert_consistency()
                if director.score > scope.best_score:
                    scope.update_best()
            self.acceptor.step_ended(director.score)

        steps = scope.step_count - start_step
        logger.info(
            f"Local Search beendet: {steps} Schritte, {accepted} akzeptiert | "
            f"Zeit: {scope.elapsed:.2f}s | "
            f"Bester Score: {scope.best_score} (vorher {start_score})"
        )
