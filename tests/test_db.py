"""Persistence layer: schema, registry lookups and download counters."""

from datetime import date

from gemstats import db


def test_schema_version_recorded():
    row = db.get_conn().execute("SELECT value FROM _meta WHERE key='schema_version'").fetchone()
    assert row["value"] == str(db.SCHEMA_VERSION)


def test_full_name_for():
    assert db.full_name_for("rake", "1.0.0") == "rake-1.0.0"
    assert db.full_name_for("nokogiri", "1.0", "java") == "nokogiri-1.0-java"


def test_create_version_creates_rubygem_once():
    db.create_version("rake", "1.0.0")
    db.create_version("rake", "1.1.0")
    rows = db.get_conn().execute("SELECT * FROM rubygems").fetchall()
    assert [r["name"] for r in rows] == ["rake"]


def test_rubygem_name_for():
    db.create_version("rack-test", "0.6.3")
    assert db.rubygem_name_for("rack-test-0.6.3") == "rack-test"
    assert db.rubygem_name_for("rack-test-9.9.9") is None


def test_public_versions_order_ties_by_insert():
    db.create_version("rake", "1.0.0", created_at="2024-01-01 00:00:00")
    db.create_version("rake", "1.0.1", created_at="2024-01-01 00:00:00")
    rubygem = db.find_rubygem_by_name("rake")
    assert [v["number"] for v in db.public_versions(rubygem["id"])] == ["1.0.1", "1.0.0"]


def test_counters_accumulate_across_days():
    db.create_version("rake", "1.0.0")
    db.incr("rake", "rake-1.0.0", day=date(2024, 1, 1))
    db.incr("rake", "rake-1.0.0", day="2024-01-02", by=2)
    db.incr("rake", "rake-1.0.0")
    assert db.for_version("rake-1.0.0") == 4
    assert db.for_rubygem("rake") == 4
    assert db.count() == 4


def test_counters_default_to_zero():
    assert db.count() == 0
    assert db.for_rubygem("nothing") == 0
    assert db.for_version("nothing-1.0") == 0


def test_most_downloaded_today_skips_unresolved_counters():
    db.create_version("rake", "1.0.0")
    db.incr("rake", "rake-1.0.0", by=2)
    db.incr("ghost", "ghost-0.1", by=9)
    pairs = db.most_downloaded_today(10)
    assert [(row["full_name"], n) for row, n in pairs] == [("rake-1.0.0", 2)]


def test_for_versions_sums_every_day():
    db.create_version("rake", "1.0.0")
    db.create_version("rake", "2.0.0")
    db.incr("rake", "rake-1.0.0", day="2024-01-01", by=2)
    db.incr("rake", "rake-1.0.0", by=3)
    db.incr("rake", "rake-2.0.0")
    assert db.for_versions(["rake-1.0.0", "rake-2.0.0", "rake-9.9.9"]) == {
        "rake-1.0.0": 5,
        "rake-2.0.0": 1,
        "rake-9.9.9": 0,
    }
    assert db.for_versions([]) == {}


def test_for_versions_spans_parameter_chunks():
    names = [f"big-0.0.{i}" for i in range(1200)]
    db.incr("big", names[0])
    db.incr("big", names[-1], by=4)
    counts = db.for_versions(names)
    assert len(counts) == 1200
    assert counts[names[0]] == 1
    assert counts[names[-1]] == 4
    assert counts[names[600]] == 0
