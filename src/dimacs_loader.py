"""
DIMACS CNF loader.

Reads ``.cnf`` files into ``(num_vars, num_clauses, clauses)`` triples and
computes simple structural statistics about a formula.
"""

import glob
import os
from typing import Any, Dict, Iterable, List, Tuple


class CNFFormatError(ValueError):
    """Raised when a DIMACS file contains a line that cannot be decoded."""

    def __init__(self, message, line_number=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


def _parse_lines(lines: Iterable[str]) -> Tuple[int, int, List[List[int]]]:
    clauses = []
    num_vars = 0
    num_clauses = 0

    for line_number, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith('c'):
            continue
        # SATLIB benchmarks end with "%" followed by a lone "0"
        if line.startswith('%'):
            break
        if line.startswith('p'):
            parts = line.split()
            if len(parts) < 4 or parts[1] != 'cnf':
                raise CNFFormatError(f"malformed problem line: {line!r}", line_number)
            try:
                num_vars = int(parts[2])
                num_clauses = int(parts[3])
            except ValueError:
                raise CNFFormatError(f"malformed problem line: {line!r}", line_number) from None
            continue

        try:
            nums = [int(x) for x in line.split()]
        except ValueError:
            raise CNFFormatError(f"non-integer literal in clause: {line!r}", line_number) from None

        clause = [lit for lit in nums if lit != 0]
        if clause:
            clauses.append(clause)

    return num_vars, num_clauses, clauses


def parse_dimacs_cnf(filepath: str) -> Tuple[int, int, List[List[int]]]:
    """
    Parse a DIMACS CNF file.

    Args:
        filepath: Path to the .cnf file

    Returns:
        (num_vars, num_clauses, clauses) where num_clauses is the count
        declared on the problem line, which may differ from len(clauses).
    """
    with open(filepath, 'r') as f:
        return _parse_lines(f)


def parse_dimacs_string(text: str) -> Tuple[int, int, List[List[int]]]:
    """Parse DIMACS CNF content held in a string."""
    return _parse_lines(text.splitlines())


def analyze_cnf_structure(clauses: List[List[int]]) -> Dict[str, Any]:
    """
    Analyze the structural properties of a CNF formula.

    Returns a dict with clause count, clause lengths, the distinct lengths,
    the sorted variables in use, their count and the clause/variable density.
    """
    clause_lengths = [len(clause) for clause in clauses]
    variables_used = sorted({abs(lit) for clause in clauses for lit in clause})

    return {
        'clause_count': len(clauses),
        'clause_lengths': clause_lengths,
        'unique_clause_lengths': sorted(set(clause_lengths)),
        'variables_used': variables_used,
        'num_variables': len(variables_used),
        'density': len(clauses) / max(1, len(variables_used)),
    }


def load_benchmark_folder(folder_path: str) -> List[Tuple[str, int, int, List[List[int]]]]:
    """
    Load every .cnf file in a folder.

    Returns a list of (file_name, num_vars, num_clauses, clauses) tuples
    sorted by file name. Files that fail to parse are reported and skipped.
    """
    benchmarks = []
    cnf_files = sorted(glob.glob(os.path.join(folder_path, "*.cnf")))

    for cnf_file in cnf_files:
        try:
            num_vars, num_clauses, clauses = parse_dimacs_cnf(cnf_file)
        except (OSError, CNFFormatError) as e:
            print(f"⚠️  Failed to load {cnf_file}: {e}")
            continue
        benchmarks.append((os.path.basename(cnf_file), num_vars, num_clauses, clauses))

    return benchmarks


def print_benchmark_info(benchmark):
    """Pretty-print a (name, num_vars, num_clauses, clauses) benchmark."""
    name, num_vars, num_clauses, clauses = benchmark
    structure = analyze_cnf_structure(clauses)

    print(f"\n{'='*60}")
    print(f"📊 Benchmark: {name}")
    print(f"{'='*60}")
    print(f"Variables: {num_vars}")
    print(f"Clauses: {len(clauses)} (declared {num_clauses})")
    print(f"Density: {len(clauses)/max(1, num_vars):.2f}")

    if clauses:
        lengths = structure['clause_lengths']
        print(f"\nClause lengths:")
        print(f"  min: {min(lengths)}")
        print(f"  max: {max(lengths)}")
        print(f"  mean: {sum(lengths)/len(lengths):.2f}")

        print(f"\nFirst 5 clauses:")
        for i, clause in enumerate(clauses[:5]):
            print(f"  {i+1}: {clause}")

    return structure
