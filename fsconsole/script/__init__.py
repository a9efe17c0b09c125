from .runner import ScriptRunner, ScriptReport, ScriptResult, read_script, split_script
from .sample import SAMPLE_SCRIPT

__all__ = ["ScriptRunner", "ScriptReport", "ScriptResult", "read_script", "split_script", "SAMPLE_SCRIPT"]
