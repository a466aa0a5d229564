"""Starter .diffskills.toml template."""

DEFAULT_TOML = """\
# diffskills configuration
version = "1.0"

[skills]
directory = "~/.diffskills/skills"
enabled = ["security-audit", "best-practices"]   # run by `diffskills check` without --skill
install_defaults = true                          # write any missing bundled skills before `check`

[engine]
max_workers = 1           # >1 runs skills on a thread pool

[output]
format = "terminal"       # terminal | json | prompt
fail_on = "critical"      # critical | warning | info | none
"""
