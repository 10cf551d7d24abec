from .main import run_auto_commit

__all__ = ["run_auto_commit"]
