from ryumodmanager.reporter import ConsoleReporter, Reporter


def test_console_reporter_hides_debug_until_verbose(capsys):
    reporter = ConsoleReporter()

    reporter.debug("hidden")
    reporter.info("shown")
    assert capsys.readouterr().out == "[info] shown\n"

    reporter.set_verbose(True)
    reporter.debug("details", indent=2)
    assert capsys.readouterr().out == "  [debug] details\n"


def test_verbose_flag_is_per_reporter(capsys):
    quiet = ConsoleReporter()
    loud = ConsoleReporter(verbose=True)

    quiet.debug("from quiet")
    loud.debug("from loud")

    assert capsys.readouterr().out == "[debug] from loud\n"
    assert isinstance(quiet, Reporter)


def test_pause_without_console_input_continues(monkeypatch, capsys):
    def no_input(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", no_input)
    reporter = ConsoleReporter(verbose=True)

    reporter.pause("Program finished.")

    assert "No console input available" in capsys.readouterr().out
