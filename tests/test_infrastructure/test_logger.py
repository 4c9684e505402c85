"""Tests for logging setup."""

import os

import structlog

from dotman.infrastructure.logger import logger


class TestLogger:
    def test_module_logger_carries_component_and_pid(self):
        context = structlog.get_context(logger)
        assert context["component"] == "dotman"
        assert context["pid"] == os.getpid()
