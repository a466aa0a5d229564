"""Tests for the rule engine — trigger gating, line accuracy, scan scope."""

import logging
import textwrap

import pytest

from diffskills.diff.parser import parse_diff
from diffskills.engine.executor import (
    SkillEngine,
    check_regex_rule,
    execute_skill,
    execute_skills,
    extension_matches,
    run_skills,
    should_run,
)
from diffskills.skills.defaults import install_default_skills
from diffskills.skills.loader import SkillLoader
from diffskills.skills.models import Severity, SkillFile, SkillRule, SkillTrigger


def _skill(name="s", triggers=None, rules=None) -> SkillFile:
    return SkillFile(
        name=name,
        version="1",
        description="",
        triggers=tuple(triggers or [SkillTrigger(file_extensions=(".py",))]),
        rules=tuple(rules or []),
    )


def _rule(rule_id="r", pattern="TODO:", severity=Severity.WARNING, check=None) -> SkillRule:
    return SkillRule(id=rule_id, severity=severity, message=f"{rule_id} hit", pattern=pattern, check=check)


def _diff_for(path: str, body: str = "@@ -0,0 +1 @@\n+x\n"):
    return parse_diff(f"diff --git a/{path} b/{path}\n{body}")


class TestExtensionMatching:
    @pytest.mark.parametrize("configured", [".py", "py", "*.py", ".PY"])
    def test_equivalent_spellings(self, configured):
        assert extension_matches(configured, "py") is True

    def test_different_extension(self):
        assert extension_matches(".ts", "py") is False

    def test_no_partial_suffix(self):
        assert extension_matches(".tsx", "x") is False

    def test_compound_extension(self):
        assert extension_matches(".tar.gz", "gz") is True

    def test_file_without_extension_never_matches(self):
        assert extension_matches(".py", "") is False


class TestTriggers:
    def test_extension_trigger_matches(self):
        assert should_run(_skill(), _diff_for("src/main.py")) is True

    def test_extension_case_insensitive(self):
        assert should_run(_skill(), _diff_for("src/MAIN.PY")) is True

    def test_extension_trigger_misses(self):
        assert should_run(_skill(), _diff_for("src/main.ts")) is False

    def test_path_trigger(self):
        skill = _skill(triggers=[SkillTrigger(path_contains=("migrations/",))])
        assert should_run(skill, _diff_for("db/migrations/0001.sql")) is True
        assert should_run(skill, _diff_for("db/models.sql")) is False

    def test_any_trigger_suffices(self):
        skill = _skill(triggers=[
            SkillTrigger(file_extensions=(".go",)),
            SkillTrigger(path_contains=("docs/",)),
        ])
        assert should_run(skill, _diff_for("docs/readme.md")) is True

    def test_any_file_suffices(self):
        diff = parse_diff(
            "diff --git a/a.ts b/a.ts\n@@ -0,0 +1 @@\n+x\n"
            "diff --git a/b.py b/b.py\n@@ -0,0 +1 @@\n+y\n"
        )
        assert should_run(_skill(), diff) is True

    def test_empty_trigger_never_matches(self):
        skill = _skill(triggers=[SkillTrigger()])
        assert should_run(skill, _diff_for("a.py")) is False

    def test_not_triggered_result(self):
        result = execute_skill(_skill(rules=[_rule(pattern=".")]), _diff_for("a.ts"))
        assert result.passed is True
        assert result.findings == []
        assert result.execution_time == 0
        assert result.skipped is True


class TestRuleExecution:
    def test_line_accurate_finding(self, sample_diff_todo):
        skill = _skill(triggers=[SkillTrigger(file_extensions=(".swift",))], rules=[_rule("no-todo")])
        result = execute_skill(skill, parse_diff(sample_diff_todo))
        assert result.passed is False
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.rule_id == "no-todo"
        assert finding.file == "test.swift"
        assert finding.line == 2
        assert finding.severity is Severity.WARNING
        assert finding.message == "no-todo hit"

    def test_context_then_addition(self):
        diff = parse_diff(
            "diff --git a/a.py b/a.py\n"
            "@@ -1,1 +1,2 @@\n"
            " import os\n"
            "+// TODO: x\n"
        )
        findings = check_regex_rule(_rule(), diff)
        assert [f.line for f in findings] == [2]

    def test_deletions_never_scanned(self):
        diff = parse_diff(
            "diff --git a/a.py b/a.py\n"
            "@@ -1,2 +1,1 @@\n"
            "-# TODO: removed\n"
            " keep\n"
        )
        assert check_regex_rule(_rule(), diff) == []

    def test_context_never_scanned(self):
        diff = parse_diff(
            "diff --git a/a.py b/a.py\n"
            "@@ -1,1 +1,2 @@\n"
            " # TODO: already there\n"
            "+new = 1\n"
        )
        assert check_regex_rule(_rule(), diff) == []

    def test_case_insensitive_match(self):
        diff = _diff_for("a.py", "@@ -0,0 +1 @@\n+# todo: lower\n")
        assert len(check_regex_rule(_rule(), diff)) == 1

    def test_line_numbers_across_hunks(self):
        diff = parse_diff(
            "diff --git a/f.py b/f.py\n"
            "@@ -5,0 +5,1 @@\n"
            "+# TODO: at 5\n"
            "@@ -20,2 +21,2 @@\n"
            "-old\n"
            " ctx\n"
            "+# TODO: at 22\n"
        )
        assert [f.line for f in check_regex_rule(_rule(), diff)] == [5, 22]

    def test_findings_follow_rule_then_file_order(self, sample_diff_credentials):
        diff = parse_diff(
            sample_diff_credentials
            + "diff --git a/b.py b/b.py\n@@ -0,0 +1 @@\n+eval(x)\n"
        )
        skill = _skill(rules=[
            _rule("eval", pattern=r"eval\("),
            _rule("key", pattern="api_key"),
        ])
        result = execute_skill(skill, diff)
        assert [(f.rule_id, f.file, f.line) for f in result.findings] == [
            ("eval", "app/settings.py", 14),
            ("eval", "b.py", 1),
            ("key", "app/settings.py", 12),
        ]

    def test_check_rules_are_inert(self):
        skill = _skill(rules=[_rule(pattern=None, check="anything mentioning x")])
        result = execute_skill(skill, _diff_for("a.py"))
        assert result.passed is True
        assert result.skipped is False
        assert result.findings == []

    def test_unvalidated_bad_pattern_yields_nothing(self, caplog):
        skill = _skill(rules=[
            _rule("broken", pattern="(unclosed"),
            _rule("todo"),
        ])
        diff = _diff_for("a.py", "@@ -0,0 +1 @@\n+# TODO: (unclosed\n")
        with caplog.at_level(logging.WARNING, logger="diffskills.engine.executor"):
            result = execute_skill(skill, diff)
        assert [f.rule_id for f in result.findings] == ["todo"]
        assert "broken" in caplog.text

    def test_multiple_matches_one_finding_per_line(self):
        diff = _diff_for("a.py", "@@ -0,0 +1 @@\n+TODO: a TODO: b\n")
        assert len(check_regex_rule(_rule(), diff)) == 1

    def test_deterministic(self, sample_diff_credentials):
        diff = parse_diff(sample_diff_credentials)
        skill = _skill(rules=[_rule("any", pattern=".")])
        assert execute_skill(skill, diff).findings == execute_skill(skill, diff).findings


class TestRunSkills:
    def test_thread_pool_keeps_order(self, sample_diff_credentials):
        diff = parse_diff(sample_diff_credentials)
        skills = [_skill(name=f"s{i}", rules=[_rule(pattern=".")]) for i in range(6)]
        parallel = run_skills(skills, diff, max_workers=4)
        sequential = run_skills(skills, diff)
        assert [r.skill_name for r in parallel] == [f"s{i}" for i in range(6)]
        assert [r.findings for r in parallel] == [r.findings for r in sequential]

    def test_empty_skill_list(self, sample_diff_credentials):
        assert run_skills([], parse_diff(sample_diff_credentials), max_workers=4) == []


SKILL_YAML = textwrap.dedent("""\
    name: {name}
    version: 1.0.0
    description: A test skill
    triggers:
      - file_extension: [".swift"]
    rules:
      - id: no-todo
        severity: warning
        pattern: "TODO:"
        message: "No TODOs allowed"
""")


class TestSkillEngine:
    def test_load_and_execute(self, skills_dir, sample_diff_todo):
        (skills_dir / "test.yaml").write_text(SKILL_YAML.format(name="test-skill"))
        results = SkillEngine(skills_dir).execute_skills(parse_diff(sample_diff_todo), ["test-skill"])
        assert len(results) == 1
        assert results[0].passed is False
        assert results[0].findings[0].rule_id == "no-todo"
        assert results[0].findings[0].line == 2

    def test_empty_ids_skip_loading(self, skills_dir, sample_diff_todo):
        class ExplodingLoader(SkillLoader):
            def load_skills(self, directory):
                raise AssertionError("should not load")

        engine = SkillEngine(skills_dir, loader=ExplodingLoader())
        assert engine.execute_skills(parse_diff(sample_diff_todo), []) == []

    def test_unknown_ids_ignored(self, skills_dir, sample_diff_todo):
        (skills_dir / "test.yaml").write_text(SKILL_YAML.format(name="test-skill"))
        results = execute_skills(parse_diff(sample_diff_todo), ["missing", "test-skill"], skills_dir)
        assert [r.skill_name for r in results] == ["test-skill"]

    def test_results_follow_requested_order(self, skills_dir, sample_diff_todo):
        for name in ("alpha", "beta", "gamma"):
            (skills_dir / f"{name}.yaml").write_text(SKILL_YAML.format(name=name))
        diff = parse_diff(sample_diff_todo)
        engine = SkillEngine(skills_dir, max_workers=3)
        results = engine.execute_skills(diff, ["gamma", "alpha", "beta", "alpha"])
        assert [r.skill_name for r in results] == ["gamma", "alpha", "beta"]

    def test_not_triggered_skill_passes(self, skills_dir):
        (skills_dir / "test.yaml").write_text(SKILL_YAML.format(name="test-skill"))
        results = execute_skills(_diff_for("main.py"), ["test-skill"], skills_dir)
        assert results[0].passed is True
        assert results[0].skipped is True

    def test_default_security_skill(self, tmp_path, sample_diff_credentials):
        install_default_skills(tmp_path)
        results = execute_skills(parse_diff(sample_diff_credentials), ["security-audit"], tmp_path)
        rules = {(f.rule_id, f.line) for f in results[0].findings}
        assert ("hardcoded-credentials", 12) in rules
        assert ("unsafe-eval", 14) in rules
        assert all(f.severity is Severity.CRITICAL for f in results[0].findings)
