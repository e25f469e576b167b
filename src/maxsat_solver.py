"""
Community-guided MAX-SAT heuristic.

Pipeline (each phase works on the full assignment left by the previous one):
1. Community-priority assignment: starting from a random assignment, walk
   communities from largest to smallest and greedily fix each community
   variable to the value satisfying more of that community's clauses.
2. Local search per community: hill-climbing over the community's
   variables, scored on the community's clauses only.
3. Global refinement: repeatedly flip the first variable (by frequency in
   unsatisfied clauses) whose flip raises the global satisfied count.
"""

import time
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from cnf_utils import evaluate_assignment, random_assignment, unsatisfied_clauses


class CommunityMaxSATSolver:
    """
    MAX-SAT solver using clause communities to structure its search.

    clause_communities[i] is the community id of clauses[i].
    """

    def __init__(self, clauses: Sequence[Sequence[int]], num_vars: int,
                 clause_communities: Sequence[int], seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None, verbose: bool = False,
                 max_sweeps: int = 50, max_refinements: int = 100):
        """
        Args:
            clauses: List of clauses
            num_vars: Number of variables
            clause_communities: Community id per clause
            seed: Seed for the initial random assignment
            rng: Explicit generator; takes precedence over ``seed``
            verbose: Print per-phase progress
            max_sweeps: Sweep cap of the per-community local search
            max_refinements: Iteration cap of the global refinement
        """
        if len(clause_communities) != len(clauses):
            raise ValueError(
                f"got {len(clause_communities)} community labels for {len(clauses)} clauses"
            )

        self.clauses = clauses
        self.num_vars = num_vars
        self.clause_communities = clause_communities
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.verbose = verbose
        self.max_sweeps = max_sweeps
        self.max_refinements = max_refinements

        # Community id -> clause indices (0-based), in order of first appearance
        self.community_clauses: Dict[int, List[int]] = {}
        for idx, community in enumerate(clause_communities):
            self.community_clauses.setdefault(community, []).append(idx)

        self.stats: Dict[str, object] = {}

    def _clauses_of(self, community) -> List[Sequence[int]]:
        return [self.clauses[idx] for idx in self.community_clauses[community]]

    @staticmethod
    def _variables_of(clauses) -> List[int]:
        return sorted({abs(lit) for clause in clauses for lit in clause})

    def community_order(self) -> List[int]:
        """Community ids by descending size; ties keep first-appearance order."""
        return sorted(self.community_clauses,
                      key=lambda c: len(self.community_clauses[c]), reverse=True)

    def community_priority_assignment(self, assignment: Optional[List[bool]] = None) -> List[bool]:
        """Phase 1: greedy per-variable best response, largest communities first."""
        if assignment is None:
            assignment = random_assignment(self.num_vars, self.rng)

        for community in self.community_order():
            clauses = self._clauses_of(community)
            for var in self._variables_of(clauses):
                assignment[var - 1] = True
                score_true = evaluate_assignment(clauses, assignment)
                assignment[var - 1] = False
                score_false = evaluate_assignment(clauses, assignment)
                assignment[var - 1] = score_true >= score_false

        return assignment

    def local_search_per_community(self, assignment: List[bool]) -> List[bool]:
        """Phase 2: hill-climbing restricted to each community in turn."""
        total_sweeps = 0

        for community in self.community_clauses:
            clauses = self._clauses_of(community)
            variables = self._variables_of(clauses)
            current = evaluate_assignment(clauses, assignment)

            for _ in range(self.max_sweeps):
                total_sweeps += 1
                improved = False
                for var in variables:
                    assignment[var - 1] = not assignment[var - 1]
                    score = evaluate_assignment(clauses, assignment)
                    if score > current:
                        current = score
                        improved = True
                    else:
                        assignment[var - 1] = not assignment[var - 1]
                if not improved:
                    break

        self.stats['sweeps'] = total_sweeps
        return assignment

    def global_refinement(self, assignment: List[bool]) -> List[bool]:
        """Phase 3: first-improvement flips driven by unsatisfied-clause frequency."""
        current = evaluate_assignment(self.clauses, assignment)
        refinements = 0

        for _ in range(self.max_refinements):
            unsat = unsatisfied_clauses(self.clauses, assignment)
            if not unsat:
                break

            frequency = Counter()
            for idx in unsat:
                frequency.update({abs(lit) for lit in self.clauses[idx]})

            candidates = sorted(frequency, key=lambda v: (-frequency[v], v))

            flipped = False
            for var in candidates:
                assignment[var - 1] = not assignment[var - 1]
                score = evaluate_assignment(self.clauses, assignment)
                if score > current:
                    current = score
                    flipped = True
                    break
                assignment[var - 1] = not assignment[var - 1]

            # Local optimum under single flips
            if not flipped:
                break
            refinements += 1

        self.stats['refinements'] = refinements
        return assignment

    def solve(self) -> Tuple[List[bool], int]:
        """
        Run all three phases.

        Returns:
            (assignment, score) where score is the number of satisfied clauses
        """
        start_time = time.time()

        if self.verbose:
            print(f"🚀 Solving: {self.num_vars} variables, {len(self.clauses)} clauses, "
                  f"{len(self.community_clauses)} communities")

        assignment = self.community_priority_assignment()
        phase1_score = evaluate_assignment(self.clauses, assignment)
        if self.verbose:
            print(f"   Phase 1 (community priority): {phase1_score}/{len(self.clauses)}")

        phase1_assignment = list(assignment)
        assignment = self.local_search_per_community(assignment)
        phase2_score = evaluate_assignment(self.clauses, assignment)
        if self.verbose:
            print(f"   Phase 2 (local search):       {phase2_score}/{len(self.clauses)}")

        # Community-local moves may break clauses elsewhere
        phase2_reverted = phase2_score < phase1_score
        if phase2_reverted:
            if self.verbose:
                print("   Phase 2 lowered the global score, continuing from Phase 1")
            assignment = phase1_assignment

        assignment = self.global_refinement(assignment)
        score = evaluate_assignment(self.clauses, assignment)
        if self.verbose:
            print(f"   Phase 3 (global refinement):  {score}/{len(self.clauses)}")

        self.stats.update({
            'phase1_score': phase1_score,
            'phase2_score': phase2_score,
            'phase2_reverted': phase2_reverted,
            'final_score': score,
            'time': time.time() - start_time,
        })
        return assignment, score


def solve_with_communities(clauses: Sequence[Sequence[int]], num_vars: int,
                           clause_communities: Sequence[int], seed: Optional[int] = None,
                           rng: Optional[np.random.Generator] = None,
                           verbose: bool = False) -> Tuple[List[bool], int]:
    """
    Convenience function running the community-guided solver.

    Returns:
        Tuple of (assignment, score)
    """
    solver = CommunityMaxSATSolver(clauses, num_vars, clause_communities,
                                   seed=seed, rng=rng, verbose=verbose)
    return solver.solve()


def solve_maxsat_baseline(clauses: Sequence[Sequence[int]], num_vars: int,
                          num_trials: int = 100, seed: Optional[int] = None,
                          rng: Optional[np.random.Generator] = None) -> Tuple[List[bool], int]:
    """Baseline: best of num_trials + 1 independent random assignments."""
    if rng is None:
        rng = np.random.default_rng(seed)

    best_assignment = random_assignment(num_vars, rng)
    best_score = evaluate_assignment(clauses, best_assignment)

    for _ in range(num_trials):
        assignment = random_assignment(num_vars, rng)
        score = evaluate_assignment(clauses, assignment)
        if score > best_score:
            best_assignment = assignment
            best_score = score

    return best_assignment, best_score
