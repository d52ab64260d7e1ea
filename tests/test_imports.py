"""Import tests for the headmotion package."""

import importlib
import sys

import pytest


class TestNoCircularImports:
    """Importing submodules in any order must not fail."""

    def test_import_headmotion_fresh(self):
        modules_to_clear = [k for k in sys.modules if k.startswith("headmotion")]
        for mod in modules_to_clear:
            sys.modules.pop(mod, None)

        hm = importlib.import_module("headmotion")
        assert hasattr(hm, "HeadMotionEngine")

    @pytest.mark.parametrize(
        "module_name",
        [
            "headmotion.samples",
            "headmotion.series",
            "headmotion.smoothing",
            "headmotion.interpolation",
            "headmotion.config",
            "headmotion.transforms",
            "headmotion.playback",
            "headmotion.selection",
            "headmotion.engine",
            "headmotion.geometry",
            "headmotion.backends.matplotlib_backend",
        ],
    )
    def test_import_submodule(self, module_name):
        module = importlib.import_module(module_name)
        assert module.__doc__


class TestPublicApi:
    def test_all_exports_importable(self):
        import headmotion

        for name in headmotion.__all__:
            assert hasattr(headmotion, name), name

    def test_null_handler_installed(self):
        import logging

        import headmotion  # noqa: F401

        handlers = logging.getLogger("headmotion").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)
