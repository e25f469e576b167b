"""
Utility functions for scoring truth assignments against CNF formulas.

Assignments are plain lists of booleans indexed 0-based:
``assignment[v - 1]`` is the value of variable ``v``.
"""

import itertools
from typing import List, Optional, Sequence, Tuple

import numpy as np


def is_clause_satisfied(clause: Sequence[int], assignment: Sequence[bool]) -> bool:
    """Check if a clause is satisfied by the given assignment."""
    for lit in clause:
        value = assignment[abs(lit) - 1]
        if (lit > 0 and value) or (lit < 0 and not value):
            return True
    return False


def evaluate_assignment(clauses: Sequence[Sequence[int]], assignment: Sequence[bool]) -> int:
    """
    Count how many clauses are satisfied by the given assignment.

    Args:
        clauses: List of clauses, each clause is a sequence of signed integers
        assignment: List of booleans, one per variable

    Returns:
        Number of satisfied clauses, between 0 and len(clauses)
    """
    return sum(1 for clause in clauses if is_clause_satisfied(clause, assignment))


def unsatisfied_clauses(clauses: Sequence[Sequence[int]], assignment: Sequence[bool]) -> List[int]:
    """Indices (0-based) of clauses falsified by the assignment."""
    return [idx for idx, clause in enumerate(clauses)
            if not is_clause_satisfied(clause, assignment)]


def random_assignment(num_vars: int, rng: np.random.Generator) -> List[bool]:
    """Uniformly random truth assignment for variables 1..num_vars."""
    return [bool(bit) for bit in rng.integers(0, 2, size=num_vars)]


def verify_assignment(clauses: Sequence[Sequence[int]], assignment: Sequence[bool]) -> bool:
    """
    Verify if an assignment satisfies every clause of a formula.

    Args:
        clauses: CNF formula
        assignment: List of booleans, one per variable

    Returns:
        True if the assignment satisfies all clauses, False otherwise
    """
    return all(is_clause_satisfied(clause, assignment) for clause in clauses)


def generate_random_3sat(num_vars: int, num_clauses: int,
                         seed: Optional[int] = None) -> List[Tuple[int, int, int]]:
    """
    Generate a random 3-SAT formula.

    Args:
        num_vars: Number of variables (at least 3)
        num_clauses: Number of clauses
        seed: Random seed for reproducibility

    Returns:
        Random 3-SAT formula
    """
    if num_vars < 3:
        raise ValueError(f"need at least 3 variables for 3-SAT, got {num_vars}")

    rng = np.random.default_rng(seed)
    formula = []
    for _ in range(num_clauses):
        # Select 3 distinct variables
        vars_selected = rng.choice(np.arange(1, num_vars + 1), size=3, replace=False)
        signs = rng.random(3) > 0.5
        clause = tuple(int(var) if positive else -int(var)
                       for var, positive in zip(vars_selected, signs))
        formula.append(clause)

    return formula


def brute_force_maxsat(clauses: Sequence[Sequence[int]], num_vars: int) -> Tuple[List[bool], int]:
    """
    Exhaustive MAX-SAT optimum over all 2**num_vars assignments.

    Only meant for tiny instances (checking heuristics against the optimum).
    """
    best_assignment = [False] * num_vars
    best_score = evaluate_assignment(clauses, best_assignment)

    for bits in itertools.product([False, True], repeat=num_vars):
        score = evaluate_assignment(clauses, bits)
        if score > best_score:
            best_assignment = list(bits)
            best_score = score
            if best_score == len(clauses):
                break

    return best_assignment, best_score
