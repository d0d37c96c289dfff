from neighbor_discovery.utils.error_handler import (
    ConfigurationError, ErrorContext, ErrorHandler, ErrorSeverity, ErrorType,
    NetworkDiscoveryError, ProbeFailure, ToolValidator, ValidationError
)
from neighbor_discovery.utils.logger import LogLevel, set_log_level


def test_exception_hierarchy():
    for error_class in (ConfigurationError, ValidationError):
        assert issubclass(error_class, NetworkDiscoveryError)

    failure = ProbeFailure("192.168.1.9", "timeout")
    assert isinstance(failure, NetworkDiscoveryError)
    assert str(failure) == "Probe to 192.168.1.9 failed: timeout"


def test_handle_error_counts_and_never_retries(capsys):
    handler = ErrorHandler()
    context = ErrorContext(
        error_type=ErrorType.SUBPROCESS_ERROR,
        severity=ErrorSeverity.MEDIUM,
        operation="read_neighbor_table",
        component="LinuxNeighborReader",
    )

    assert handler.handle_error(OSError("boom"), context) is False
    assert handler.error_statistics[ErrorType.SUBPROCESS_ERROR] == 1
    assert "LinuxNeighborReader.read_neighbor_table" in capsys.readouterr().err


def test_low_severity_is_debug_only(capsys):
    set_log_level(LogLevel.INFO)
    context = ErrorContext(ErrorType.SUBPROCESS_ERROR, ErrorSeverity.LOW, "sweep", "Prober")

    ErrorHandler().handle_error(ProbeFailure("10.0.0.1", "no reply"), context)

    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_tool_validator(mocker, capsys):
    mocker.patch("shutil.which", side_effect=lambda name: "/sbin/ip" if name == "ip" else None)
    validator = ToolValidator(ErrorHandler())

    assert validator.validate_tool("ip")
    assert not validator.validate_tool("ndp")
    assert "ndp" in capsys.readouterr().err


def test_error_summary_lists_only_seen_types():
    set_log_level(LogLevel.ERROR)
    handler = ErrorHandler()
    assert handler.error_summary() == {}

    for _ in range(2):
        handler.handle_error(FileNotFoundError("ip"), ErrorContext(
            ErrorType.TOOL_MISSING_ERROR, ErrorSeverity.MEDIUM, "read_neighbor_table", "LinuxNeighborReader",
            {"tool_name": "ip"}
        ))
    handler.handle_error(OSError("boom"), ErrorContext(
        ErrorType.SUBPROCESS_ERROR, ErrorSeverity.MEDIUM, "read_neighbor_table", "LinuxNeighborReader"
    ))

    assert handler.error_summary() == {"tool_missing_error": 2, "subprocess_error": 1}
