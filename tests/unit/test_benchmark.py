"""Smoke tests for the KD-tree vs brute-force timing harness."""

import logging

import jax
import pytest

from kdspatial.benchmark import (
    BenchmarkConfig,
    ExperimentResult,
    format_experiment,
    log_experiment,
    main,
    random_points,
    run_benchmarks,
    run_experiment,
)


def test_random_points_are_unit_cube_float64():
    points = random_points(jax.random.PRNGKey(0), 40, 3)

    assert points.shape == (40, 3)
    assert str(points.dtype) == "float64"
    assert bool((points >= 0.0).all()) and bool((points < 1.0).all())


def test_run_experiment_reports_timings_and_no_mismatches():
    result = run_experiment(3, 64, num_queries=20, seed=1, verify=True)

    assert isinstance(result, ExperimentResult)
    assert result.dimension == 3
    assert result.num_points == 64
    assert result.num_queries == 20
    assert result.build_seconds >= 0.0
    assert result.tree_query_seconds >= 0.0
    assert result.brute_force_seconds >= 0.0
    assert result.mismatches == 0


def test_run_experiment_skips_verification_by_default():
    result = run_experiment(2, 10, num_queries=5)

    assert result.mismatches is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dimension": 0, "num_points": 10},
        {"dimension": 2, "num_points": 0},
        {"dimension": 2, "num_points": 10, "num_queries": 0},
    ],
)
def test_run_experiment_rejects_empty_problems(kwargs):
    with pytest.raises(ValueError, match=">= 1"):
        run_experiment(**kwargs)


def test_run_benchmarks_covers_full_grid():
    config = BenchmarkConfig(
        dimensions=(2, 4),
        dataset_sizes=(8, 16),
        num_queries=4,
        verify=True,
    )

    results = run_benchmarks(config)

    assert [(r.dimension, r.num_points) for r in results] == [
        (2, 8),
        (2, 16),
        (4, 8),
        (4, 16),
    ]
    assert all(r.mismatches == 0 for r in results)


def test_format_and_log_experiment(caplog):
    result = ExperimentResult(
        dimension=5,
        num_points=100,
        num_queries=1000,
        build_seconds=0.0015,
        tree_query_seconds=0.25,
        brute_force_seconds=0.5,
        mismatches=0,
    )

    report = format_experiment(result)
    assert "Experiment: k = 5 dimensions, numPoints = 100" in report
    assert "Tree Build Time:            1.500 ms" in report
    assert "Distance mismatches:        0" in report

    with caplog.at_level(logging.DEBUG, logger="kdspatial.benchmark"):
        log_experiment(result, level=logging.DEBUG)
    assert "k=5 n=100 queries=1000" in caplog.text


def test_main_prints_one_report_per_experiment(capsys):
    main(["--dimensions", "2,3", "--sizes", "10", "--num-queries", "3", "--verify"])

    out = capsys.readouterr().out
    assert out.count("Experiment:") == 2
    assert "Distance mismatches:        0" in out


def test_main_rejects_malformed_integer_lists():
    with pytest.raises(SystemExit):
        main(["--dimensions", "two"])
