from auto_commit.cli import run_auto_commit

run_auto_commit(prog_name="auto-commit")
