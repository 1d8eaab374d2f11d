"""
Output Sink
===========
Publishes step outputs to the calling workflow.

    GITHUB_OUTPUT set   → append "key=value" to that file
                          (multi-line values use the key<<DELIMITER form)
    otherwise           → log a warning; nothing is published

The value is written exactly as given.
"""
import logging
import os
import uuid

logger = logging.getLogger(__name__)


class OutputSink:
    """Process-scoped output channel for the resolved values."""

    def __init__(self, output_path: str = "") -> None:
        self.output_path = output_path

    @staticmethod
    def format_record(key: str, value: str) -> str:
        if "\n" not in value and "\r" not in value:
            return f"{key}={value}\n"
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"

    def emit(self, key: str, value: str) -> None:
        if not self.output_path:
            logger.warning(
                "No output file configured (GITHUB_OUTPUT unset), not publishing %s=%s", key, value
            )
            return

        abs_output = os.path.abspath(self.output_path)
        logger.info("Writing output %s=%s to %s", key, value, abs_output)
        with open(abs_output, "a", encoding="utf-8") as f:
            f.write(self.format_record(key, value))
