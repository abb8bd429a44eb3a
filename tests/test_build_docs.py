"""
Tests for the build script: per-example builds, the manifest and the CLI.
"""
import json
import os

import build_docs
import config
from front_matter import check_front_matter, parse_front_matter


def read_manifest(output_dir):
    path = os.path.join(output_dir, config.MANIFEST_FILE)
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def test_registered_front_matter_is_clean():
    for slug, example in build_docs.EXAMPLES.items():
        meta = dict(example["front_matter"], title=example["title"])
        assert check_front_matter(meta) == [], slug


def test_build_scatter_geo_example(tmp_path):
    record = build_docs.build_example("scatter-geo-text", str(tmp_path))

    assert record["status"] == "written"
    assert record["lint"] == []
    assert os.path.exists(record["figure_path"])

    with open(record["local_path"], encoding="utf-8") as f:
        meta, body = parse_front_matter(f.read())
    assert meta["name"] == "Text and Markers on Maps"
    assert meta["suite"] == "scatter-geo"
    assert meta["arrangement"] == "horizontal"
    assert "Canadian cities" in body


def test_build_sparse_coding_example_writes_thumbnail(tmp_path):
    record = build_docs.build_example("sparse-coding", str(tmp_path))

    assert record["status"] == "written"
    dest = tmp_path / "scikit-learn" / "plot-sparse-coding"
    assert (dest / "thumbnail" / "sparse-coding.png").exists()
    assert (dest / "sparse-coding.html").exists()


def test_build_failure_is_recorded(monkeypatch, tmp_path):
    def broken(dest_folder):
        raise RuntimeError("renderer exploded")

    monkeypatch.setitem(build_docs.EXAMPLES["scatter-geo-text"], "builder", broken)
    record = build_docs.build_example("scatter-geo-text", str(tmp_path))

    assert record["status"] == "error"
    assert "renderer exploded" in record["reason"]


def test_load_built_pages_skips_errors_and_bad_lines(tmp_path):
    manifest = tmp_path / "built.jsonl"
    manifest.write_text(
        json.dumps({"slug": "scatter-geo-text", "status": "written"}) + "\n"
        + "not json\n"
        + json.dumps({"slug": "sparse-coding", "status": "error"}) + "\n"
        + json.dumps({"status": "written"}) + "\n",
        encoding="utf-8",
    )
    assert build_docs.load_built_pages(str(manifest)) == {"scatter-geo-text"}
    assert build_docs.load_built_pages(str(tmp_path / "missing.jsonl")) == set()


def test_main_skips_already_built(tmp_path):
    out = str(tmp_path)
    assert build_docs.main(["--only", "scatter-geo-text", "--output-dir", out]) == 0
    assert len(read_manifest(out)) == 1

    assert build_docs.main(["--only", "scatter-geo-text", "--output-dir", out]) == 0
    assert len(read_manifest(out)) == 1

    assert build_docs.main(["--only", "scatter-geo-text", "--output-dir", out, "--force"]) == 0
    records = read_manifest(out)
    assert len(records) == 1
    assert records[0]["slug"] == "scatter-geo-text"


def test_main_reports_failures(monkeypatch, tmp_path):
    def broken(dest_folder):
        raise RuntimeError("no data")

    monkeypatch.setitem(build_docs.EXAMPLES["scatter-geo-text"], "builder", broken)
    assert build_docs.main(["--only", "scatter-geo-text", "--output-dir", str(tmp_path)]) == 1
    assert read_manifest(str(tmp_path))[0]["status"] == "error"


def test_forced_rebuild_keeps_other_records(tmp_path):
    out = str(tmp_path)
    manifest = os.path.join(out, config.MANIFEST_FILE)
    with open(manifest, 'w', encoding='utf-8') as f:
        f.write(json.dumps({"slug": "sparse-coding", "status": "written"}) + "\n")
        f.write(json.dumps({"slug": "scatter-geo-text", "status": "written"}) + "\n")

    assert build_docs.main(["--only", "scatter-geo-text", "--force", "--output-dir", out]) == 0

    slugs = [r["slug"] for r in read_manifest(out)]
    assert sorted(slugs) == ["scatter-geo-text", "sparse-coding"]
    assert build_docs.load_built_pages(manifest) == {"scatter-geo-text", "sparse-coding"}


def test_drop_manifest_records(tmp_path):
    manifest = tmp_path / "built.jsonl"
    manifest.write_text(
        json.dumps({"slug": "a", "status": "written"}) + "\n"
        + "not json\n"
        + json.dumps({"slug": "b", "status": "written"}) + "\n",
        encoding="utf-8",
    )

    build_docs.drop_manifest_records(str(manifest), ["a"])
    lines = manifest.read_text(encoding="utf-8").splitlines()
    assert lines == ["not json", json.dumps({"slug": "b", "status": "written"})]

    # nothing to do for a manifest that does not exist yet
    build_docs.drop_manifest_records(str(tmp_path / "missing.jsonl"), ["a"])
    assert not (tmp_path / "missing.jsonl").exists()
