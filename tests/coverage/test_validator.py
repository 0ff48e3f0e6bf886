"""End-to-end coverage validation over a temporary suite."""

import threading

import pytest

from suite_insight.coverage import CoverageValidator
from suite_insight.exceptions import AnalysisCancelledError, DocumentReadError, InvalidPathError


class TestScenarios:
    def test_unreferenced_requirements(self, suite, build):
        config = suite(
            requirements=[build.requirement("1"), build.requirement("2", "a pod restarts")],
            properties=[],
            tests={"smoke_test.go": build.go_file(build.go_func("TestSmoke", "just runs"))},
        )
        report = CoverageValidator(config).validate()

        assert report.coverage_percent == 0.0
        assert len(report.missing_coverage) == 2
        assert report.missing_coverage[0].startswith("Requirement 1: 1. WHEN")

    def test_eighty_percent(self, suite, build):
        config = suite(
            requirements=[build.requirement(n) for n in ("1", "2", "3")],
            properties=[build.property(1), build.property(2)],
            tests={
                "policy_test.go": build.go_file(
                    build.go_func("TestPolicy", "Requirement 1, Requirement 2"),
                ),
                "bounds_test.go": build.go_file(
                    build.go_func("TestBounds", "Requirement 3 and Property 1"),
                ),
                "apply_test.go": build.go_file(
                    build.go_func("TestApply", "Property 2 TODO"),
                ),
            },
        )
        report = CoverageValidator(config).validate()

        assert report.coverage_percent == pytest.approx(80.0)
        assert [p.implemented for p in report.properties] == [True, False]
        assert report.missing_coverage == [
            "Property 2: " + build.property(2).strip(),
        ]

    def test_few_test_files_recommend_reorganizing(self, suite, build):
        config = suite(
            requirements=[build.requirement("1")],
            properties=[],
            tests={"a_test.go": build.go_file(build.go_func("TestA", "Requirement 1"))},
        )
        report = CoverageValidator(config).validate()
        assert report.coverage_percent == 100.0
        assert any("organizing tests" in r for r in report.recommendations)

    def test_empty_documents(self, suite):
        config = suite(requirements=[], properties=[], tests={})
        report = CoverageValidator(config).validate()
        assert report.coverage_percent == 0.0
        assert report.requirements == []
        assert report.test_files == []


class TestErrors:
    def test_missing_document_is_fatal(self, make_config, tmp_path):
        (tmp_path / "test" / "e2e").mkdir(parents=True)
        with pytest.raises(DocumentReadError):
            CoverageValidator(make_config()).validate()

    def test_missing_test_dir_is_fatal(self, write_file, make_config):
        write_file("requirements.md", "")
        write_file("design.md", "")
        with pytest.raises(InvalidPathError):
            CoverageValidator(make_config()).validate()


class TestCancellation:
    def test_cancel_before_start(self, suite, build):
        config = suite(requirements=[build.requirement("1")], properties=[], tests={})
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(AnalysisCancelledError):
            CoverageValidator(config).validate(cancel=cancel)

    def test_cancel_during_mining_stops_before_scanning(self, suite, build):
        config = suite(
            requirements=[build.requirement("1")],
            properties=[],
            tests={"a_test.go": build.go_file(build.go_func("TestA", "Requirement 1"))},
        )
        validator = CoverageValidator(config)
        cancel = threading.Event()
        mine = validator.miner.mine

        def mine_then_cancel(*args):
            mined = mine(*args)
            cancel.set()
            return mined

        validator.miner.mine = mine_then_cancel
        with pytest.raises(AnalysisCancelledError):
            validator.validate(cancel=cancel)
        assert validator.index.parse_failures == {}
        assert validator.index._files is None
