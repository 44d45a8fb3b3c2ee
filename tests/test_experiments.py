import csv

import pytest

import experiments


@pytest.mark.parametrize("name", sorted(experiments.GENERATOR_REGISTRY))
def test_generators_are_seeded(name):
    dataset_name, first = experiments.generate_dataset(name, 500, seed=7)
    _, second = experiments.generate_dataset(name, 500, seed=7)
    assert dataset_name == name
    assert len(first) == 500
    assert first == second


def test_unknown_generator_falls_back_to_uniform():
    dataset_name, text = experiments.generate_dataset("bogus", 100, seed=1)
    assert dataset_name == "bogus_fallback_uniform"
    assert len(text) == 100


def test_run_one_metrics():
    row = experiments.run_one("abracadabra")
    assert row.correctness_ok == 1
    assert row.text_size == 11
    assert row.unique_symbols == 5
    assert row.encoded_bits == 23
    assert row.fixed_width_bits == 33
    assert row.packed_bytes == 3
    assert row.compression_ratio < 1.0


def test_run_one_single_symbol():
    row = experiments.run_one(experiments.gen_single_symbol(64))
    assert row.correctness_ok == 1
    assert row.encoded_bits == 64
    assert row.entropy == 0.0


def test_skewed_text_beats_fixed_width():
    row = experiments.run_one(experiments.gen_repetitive(4096, dom_frac=0.99, seed=3))
    assert row.correctness_ok == 1
    assert row.compression_ratio < 0.5


def test_group_summary(tmp_path):
    rows = []
    for run_id in (1, 2):
        row = experiments.run_one(experiments.gen_english_like(256, seed=run_id))
        row.exp_name = "exp1_distribution"
        row.dataset_name = "english_like"
        row.run_id = run_id
        rows.append(row)

    out = tmp_path / "summary.csv"
    summary = experiments.group_summary(rows, out)
    assert len(summary) == 1
    assert summary[0]["n_runs"] == 2
    assert summary[0]["correctness_ok_rate"] == 1.0

    with out.open(newline="", encoding="utf-8") as f:
        written = list(csv.DictReader(f))
    assert written[0]["dataset_name"] == "english_like"
    assert "compression_ratio_stdev" in written[0]


def test_main_writes_csv(tmp_path, capsys):
    outdir = tmp_path / "results"
    code = experiments.main([
        "--outdir", str(outdir), "--runs", "1", "--size_kb", "1",
        "--min_kb", "1", "--max_kb", "2", "--no_plots",
    ])
    assert code == 0
    with (outdir / "metrics.csv").open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    # 5 default generators in exp1, 2 generators x 2 sizes in exp2
    assert len(rows) == 5 + 4
    assert all(r["correctness_ok"] == "1" for r in rows)
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out


def test_main_writes_charts(tmp_path):
    outdir = tmp_path / "results"
    code = experiments.main([
        "--outdir", str(outdir), "--runs", "1", "--size_kb", "1",
        "--generators", "zipf,english_like", "--min_kb", "1", "--max_kb", "1",
        "--exp2_generators", "uniform",
    ])
    assert code == 0
    assert (outdir / "exp1_bits_per_symbol.png").exists()
    assert (outdir / "exp1_compression_ratio.png").exists()
    assert (outdir / "exp2_time_uniform.png").exists()
