"""Tests for jadechat.exceptions."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from jadechat.exceptions import ModelSetupError, ensure_model_available, require_apple_fm


class TestModelSetupError:
    def test_message_names_context_reason_and_doctor(self):
        error = ModelSetupError("chat", "boom")
        assert error.context == "chat"
        assert error.reason == "boom"
        assert str(error).startswith("[chat] On-device model unavailable: boom")
        assert "jadechat doctor" in str(error)

    def test_blank_context_defaults_to_package_name(self):
        assert ModelSetupError("  ", "x").context == "jadechat"

    def test_is_a_runtime_error(self):
        assert isinstance(ModelSetupError("a", "b"), RuntimeError)


class TestEnsureModelAvailable:
    def test_available_model_passes(self):
        model = MagicMock()
        model.is_available.return_value = (True, None)
        ensure_model_available(model, context="unit_test")

    def test_unavailable_model_reports_reason(self):
        model = MagicMock()
        model.is_available.return_value = (False, "model not downloaded")

        with pytest.raises(ModelSetupError, match="model not downloaded") as exc_info:
            ensure_model_available(model, context="unit_test")
        assert exc_info.value.context == "unit_test"

    def test_unavailable_without_reason(self):
        model = MagicMock()
        model.is_available.return_value = (False, None)

        with pytest.raises(ModelSetupError, match="reported unavailable"):
            ensure_model_available(model, context="unit_test")

    def test_failing_check_is_chained(self):
        cause = OSError("daemon down")
        model = MagicMock()
        model.is_available.side_effect = cause

        with pytest.raises(ModelSetupError, match="OSError: daemon down") as exc_info:
            ensure_model_available(model, context="unit_test")
        assert exc_info.value.__cause__ is cause


class TestRequireAppleFM:
    def test_missing_sdk(self):
        with (
            patch(
                "jadechat.exceptions.importlib.import_module",
                side_effect=ModuleNotFoundError("No module named 'apple_fm_sdk'"),
            ),
            pytest.raises(ModelSetupError, match="No module named 'apple_fm_sdk'"),
        ):
            require_apple_fm("unit_test")

    def test_model_construction_failure(self):
        fm = SimpleNamespace(SystemLanguageModel=MagicMock(side_effect=RuntimeError("no GPU")))
        with (
            patch("jadechat.exceptions.importlib.import_module", return_value=fm),
            pytest.raises(ModelSetupError, match="RuntimeError: no GPU"),
        ):
            require_apple_fm("unit_test")

    def test_returns_module_and_model(self):
        model = MagicMock()
        model.is_available.return_value = (True, None)
        fm = SimpleNamespace(SystemLanguageModel=MagicMock(return_value=model))

        with patch("jadechat.exceptions.importlib.import_module", return_value=fm):
            assert require_apple_fm("unit_test") == (fm, model)
