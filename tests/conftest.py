import pytest

from cnf_utils import generate_random_3sat


# (1∨2∨3), (¬1∨¬2∨3), (1∨¬2∨¬3), (¬1∨2∨¬3), (¬1∨¬2∨¬3)
SMALL_CLAUSES = [
    [1, 2, 3],
    [-1, -2, 3],
    [1, -2, -3],
    [-1, 2, -3],
    [-1, -2, -3],
]


@pytest.fixture
def small_instance():
    return 3, [list(clause) for clause in SMALL_CLAUSES]


@pytest.fixture
def random_instance():
    num_vars = 20
    clauses = [list(c) for c in generate_random_3sat(num_vars, 91, seed=7)]
    return num_vars, clauses


@pytest.fixture
def small_cnf_file(tmp_path):
    path = tmp_path / "small.cnf"
    lines = ["c small test instance", "p cnf 3 5"]
    lines += [" ".join(str(lit) for lit in clause) + " 0" for clause in SMALL_CLAUSES]
    path.write_text("\n".join(lines) + "\n")
    return path
