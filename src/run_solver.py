#!/usr/bin/env python3
"""
Run the community-guided MAX-3SAT solver on DIMACS instances.

Usage:
    community-maxsat <cnf_file|folder> [options]

Examples:
    community-maxsat instances/uf20-01.cnf
    community-maxsat instances/uuf50/ --all --weighted --weight-fn quadratic
    community-maxsat instances/uuf50/ --random --plot communities.png
    community-maxsat instances/uf20-01.cnf --info --weights
"""

import argparse
import json
import random
import sys
import time
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path

from community_detection import community_sizes, detect_communities, weighted_detect_communities
from conflict_graph import WEIGHT_FUNCTIONS, build_conflict_graph, get_weight_function, weight_statistics
from dimacs_loader import CNFFormatError, load_benchmark_folder, parse_dimacs_cnf, print_benchmark_info
from maxsat_solver import CommunityMaxSATSolver, solve_maxsat_baseline


# Expected fraction of satisfied 3-clauses under a uniform random assignment
RANDOM_BOUND = 7 / 8


@dataclass
class SolverConfig:
    """Pipeline settings collected from the command line."""
    weighted: bool = False
    min_conflicts: int = 2
    weight_fn: str = 'linear'
    max_iterations: int = 100
    seed: int = 42
    baseline_trials: int = 100
    verbose: bool = True

    @classmethod
    def from_args(cls, args):
        return cls(
            weighted=args.weighted,
            min_conflicts=args.min_conflicts,
            weight_fn=args.weight_fn,
            max_iterations=args.max_iterations,
            seed=args.seed,
            baseline_trials=args.baseline_trials,
            verbose=not args.quiet,
        )


def print_header():
    print("\n" + "╔" + "═"*58 + "╗")
    print("║" + " "*13 + "🏘️  COMMUNITY-GUIDED MAX-3SAT SOLVER" + " "*9 + "║")
    print("╚" + "═"*58 + "╝\n")


def print_weight_statistics(stats):
    print(f"   Edges: {stats['edge_count']}")
    if stats['edge_count'] == 0:
        return
    print(f"   Weight: min={stats['min_weight']:.2f}, max={stats['max_weight']:.2f}, "
          f"mean={stats['mean_weight']:.2f}")
    for weight, count in stats['distribution'].items():
        print(f"   Weight {weight}: {count} edges ({100 * count / stats['edge_count']:.1f}%)")
    for threshold, count in stats['edges_at_threshold'].items():
        print(f"   Edges with weight ≥ {threshold}: {count}")


def print_result(result):
    """Print the comparison between community-guided and baseline scores."""
    n = result['n_clauses']
    score = result['score']
    baseline = result['baseline_score']

    print("\n" + "─"*60)
    print(f"📁 File: {result['file']}")
    print(f"🏘️  Communities: {result['n_communities']} (graph edges: {result['n_edges']})")
    print(f"🎲 Baseline ({result['baseline_trials']} random): {baseline}/{n} "
          f"({100 * baseline / max(1, n):.1f}%)")
    print(f"🎯 Community-guided:  {score}/{n} ({100 * score / max(1, n):.1f}%)")
    print(f"   Random bound (7/8): {RANDOM_BOUND * n:.1f}")

    improvement = score - baseline
    if improvement > 0:
        print(f"✅ Improvement: +{improvement} clauses")
    elif improvement == 0:
        print("➡️  Tied with baseline")
    else:
        print(f"❌ Difference: {improvement} clauses")

    if score == n:
        print("🏆 All clauses satisfied!")
    print(f"⏱️  Time: {result['elapsed']:.2f} sec")
    print("─"*60)


def run_on_file(filename, config, plot=None):
    """Parse one .cnf file and run the full pipeline on it."""
    num_vars, num_clauses, clauses = parse_dimacs_cnf(str(filename))
    return run_benchmark((Path(filename).name, num_vars, num_clauses, clauses), config, plot=plot)


def run_benchmark(benchmark, config, plot=None):
    """Run the full pipeline on a loaded benchmark and return a result dict."""
    filename, num_vars, num_clauses, clauses = benchmark

    if config.verbose:
        print(f"\n📂 Benchmark: {filename}")
        print(f"   Variables: {num_vars}, Clauses: {len(clauses)} (declared {num_clauses})")

    start_time = time.time()

    graph = build_conflict_graph(
        clauses, num_vars,
        weighted=config.weighted,
        min_conflicts=config.min_conflicts,
        weight_fn=get_weight_function(config.weight_fn),
        verbose=config.verbose,
    )

    detect = weighted_detect_communities if config.weighted else detect_communities
    communities = detect(graph, max_iterations=config.max_iterations, seed=config.seed)

    solver = CommunityMaxSATSolver(clauses, num_vars, communities,
                                   seed=config.seed, verbose=config.verbose)
    assignment, score = solver.solve()

    _, baseline_score = solve_maxsat_baseline(clauses, num_vars,
                                              num_trials=config.baseline_trials,
                                              seed=config.seed)
    elapsed = time.time() - start_time

    if plot:
        from visualization import plot_communities
        plot_communities(graph, communities, output=plot,
                         title=f"{filename}: clause communities")
        if config.verbose:
            print(f"🖼️  Community plot saved to {plot}")

    return {
        'file': str(filename),
        'n_vars': num_vars,
        'n_clauses': len(clauses),
        'n_edges': graph.number_of_edges(),
        'n_communities': len(community_sizes(communities)),
        'score': score,
        'baseline_score': baseline_score,
        'baseline_trials': config.baseline_trials,
        'phase_scores': [solver.stats['phase1_score'], solver.stats['phase2_score'],
                         solver.stats['final_score']],
        'phase2_reverted': solver.stats['phase2_reverted'],
        'assignment': [1 if value else 0 for value in assignment],
        'elapsed': elapsed,
    }


def print_info(benchmarks, config, show_weights):
    for benchmark in benchmarks:
        print_benchmark_info(benchmark)
        _, num_vars, _, clauses = benchmark

        if show_weights:
            # Threshold 1 exposes the whole conflict-count distribution
            graph = build_conflict_graph(clauses, num_vars, weighted=True, min_conflicts=1,
                                         weight_fn=get_weight_function(config.weight_fn))
            print(f"\nConflict weights ({config.weight_fn}):")
            print_weight_statistics(weight_statistics(graph))
        print()


def build_parser():
    parser = argparse.ArgumentParser(
        description="Community-guided MAX-3SAT solver",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('path', help='Path to a .cnf file or a folder')
    parser.add_argument('--weighted', action='store_true',
                        help='Use the weighted conflict graph and weighted label propagation')
    parser.add_argument('--min-conflicts', type=int, default=2,
                        help='Minimum conflicts for a graph edge (default: 2)')
    parser.add_argument('--weight-fn', choices=sorted(WEIGHT_FUNCTIONS), default='linear',
                        help='Conflict count to edge weight transform (default: linear)')
    parser.add_argument('--max-iterations', type=int, default=100,
                        help='Label propagation pass limit (default: 100)')
    parser.add_argument('--seed', type=int, default=42,
                        help='Seed for reproducibility (default: 42)')
    parser.add_argument('--baseline-trials', type=int, default=100,
                        help='Random assignments tried by the baseline (default: 100)')
    parser.add_argument('--all', action='store_true', help='Run on every file in the folder')
    parser.add_argument('--random', action='store_true', help='Pick one random file from the folder')
    parser.add_argument('--info', action='store_true', help='Only show formula structure')
    parser.add_argument('--weights', action='store_true',
                        help='Show conflict weight statistics (implies --info)')
    parser.add_argument('--plot', help='Save a community plot (single file runs only)')
    parser.add_argument('--output', help='Save results to JSON')
    parser.add_argument('--quiet', action='store_true', help='Quiet mode')
    return parser


def load_benchmarks(path, args):
    """Load the (name, num_vars, num_clauses, clauses) benchmarks selected by PATH."""
    if path.is_file() and path.suffix.lower() == '.cnf':
        try:
            num_vars, num_clauses, clauses = parse_dimacs_cnf(str(path))
        except (OSError, CNFFormatError) as e:
            print(f"❌ Failed to read {path}: {e}")
            return []
        return [(path.name, num_vars, num_clauses, clauses)]
    if not path.is_dir():
        print(f"❌ {path} is neither a .cnf file nor a folder")
        return []

    benchmarks = load_benchmark_folder(str(path))
    if not benchmarks:
        print(f"❌ No readable .cnf files in {path}")
        return []
    if args.random:
        return [random.Random(args.seed).choice(benchmarks)]
    if args.all:
        return benchmarks
    return benchmarks[:1]


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.weights:
        args.info = True
    config = SolverConfig.from_args(args)

    if config.verbose:
        print_header()

    benchmarks = load_benchmarks(Path(args.path), args)
    if not benchmarks:
        return 1

    if args.info:
        print_info(benchmarks, config, args.weights)
        return 0

    results = {
        'timestamp': datetime.now().isoformat(),
        'config': asdict(config),
        'results': []
    }

    for i, benchmark in enumerate(benchmarks, 1):
        if len(benchmarks) > 1 and config.verbose:
            print(f"\n{'='*60}")
            print(f"📌 File {i}/{len(benchmarks)}")
            print(f"{'='*60}")

        plot = args.plot if len(benchmarks) == 1 else None
        result = run_benchmark(benchmark, config, plot=plot)

        if config.verbose:
            print_result(result)
        else:
            print(f"{result['file']}: {result['score']}/{result['n_clauses']} "
                  f"(baseline {result['baseline_score']})")
        results['results'].append(result)

    if len(benchmarks) > 1 and config.verbose:
        solved = results['results']
        wins = sum(1 for r in solved if r['score'] > r['baseline_score'])
        mean_ratio = sum(r['score'] / max(1, r['n_clauses']) for r in solved) / len(solved)
        print("\n" + "="*60)
        print("📊 SUMMARY")
        print("="*60)
        print(f"Files: {len(solved)}")
        print(f"Beat baseline: {wins}")
        print(f"Mean satisfied fraction: {mean_ratio:.3f}")

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        if config.verbose:
            print(f"\n💾 Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
