"""
Tests for the exception hierarchy.
"""

from pathlib import Path

import pytest

from wdkconfig.core.exceptions import (
    BindingGenerationFailed,
    CacheIoFailure,
    InvalidDriverConfig,
    KitNotFound,
    OptionsError,
    ProbeFailure,
    VersionMismatch,
    WdkConfigError,
)


@pytest.mark.parametrize(
    "error",
    [
        KitNotFound(),
        ProbeFailure(Path("C:/WDK/Lib"), "Access is denied"),
        VersionMismatch("10.0.1", []),
        InvalidDriverConfig("bad"),
        OptionsError("bad"),
        BindingGenerationFailed(Path("wrapper.h"), 1),
        CacheIoFailure(Path("wdk-config.yaml"), "disk full"),
    ],
)
def test_all_errors_share_base(error):
    assert isinstance(error, WdkConfigError)


class TestKitNotFound:
    def test_lists_attempted_paths(self):
        error = KitNotFound(["C:/a", "C:/b"])

        assert error.attempted_paths == [Path("C:/a"), Path("C:/b")]
        assert str(Path("C:/a")) in str(error)
        assert "WDKContentRoot" in str(error)

    def test_no_paths(self):
        assert "searched" not in str(KitNotFound())


class TestInvalidDriverConfig:
    def test_supplied_in_message(self):
        error = InvalidDriverConfig("bad combination", {"driver_class": "UMDF"})

        assert error.supplied == {"driver_class": "UMDF"}
        assert "driver_class='UMDF'" in str(error)

    def test_options_error_is_invalid_config(self):
        assert issubclass(OptionsError, InvalidDriverConfig)


class TestOtherErrors:
    def test_version_mismatch(self):
        error = VersionMismatch("10.0.99999.0", ["10.0.22000.0", "10.0.26100.0"])
        assert "10.0.99999.0" in str(error)
        assert "10.0.26100.0" in str(error)

    def test_version_mismatch_nothing_available(self):
        assert "available: none" in str(VersionMismatch("10.0.1", []))

    def test_binding_generation_failed(self):
        error = BindingGenerationFailed(Path("wrapper.h"), 2, "  error: boom\n")
        assert str(error).endswith("error: boom")

    def test_probe_failure_without_path(self):
        error = ProbeFailure(None, "denied")
        assert str(error) == "Failed to probe kit installation: denied"
