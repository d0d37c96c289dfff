from neighbor_discovery.utils.logger import Logger, LogLevel, get_logger, set_log_level


def test_level_filters_messages(capsys):
    set_log_level(LogLevel.WARNING)
    log = get_logger("test")

    log.debug("hidden debug")
    log.info("hidden info")
    log.section("hidden section")
    log.progress_start("hidden progress")
    log.warning("shown warning")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "shown warning" in captured.err


def test_info_goes_to_stdout_with_context(capsys):
    set_log_level(LogLevel.INFO)
    get_logger("test").info("reading cache", entries=3)

    out = capsys.readouterr().out
    assert "reading cache" in out
    assert "entries=3" in out


def test_error_includes_exception(capsys):
    get_logger("test").error("failed", exception=ValueError("bad value"))
    assert "ValueError: bad value" in capsys.readouterr().err


def test_level_is_shared_by_all_loggers():
    early = Logger("early")
    set_log_level(LogLevel.DEBUG)
    assert early._should_log(LogLevel.DEBUG)
    assert get_logger("late")._should_log(LogLevel.DEBUG)


def test_section_and_progress(capsys):
    set_log_level(LogLevel.INFO)
    log = get_logger("test")

    log.section("neighbor discovery")
    log.progress_start("Reading neighbor cache")
    log.progress_end("Read 2 IPv4 entries")

    out = capsys.readouterr().out
    assert "NEIGHBOR DISCOVERY" in out
    assert "Reading neighbor cache..." in out
    assert "Read 2 IPv4 entries" in out


def test_table_prints_regardless_of_level(capsys):
    set_log_level(LogLevel.ERROR)
    log = get_logger("test")

    log.table_header(["IPv4", "Vendor"], [15, 10])
    log.table_row(["192.168.1.1", "Acme Corp"], [15, 10])

    out = capsys.readouterr().out
    assert "IPv4" in out
    assert "192.168.1.1" in out
