from apithrottle.core.reporting import log_request_error


def test_default_handler_writes_escaped_error_to_stderr(capsys):
    log_request_error(RuntimeError("[bold]upstream[/bold] 503"))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Request failed" in captured.err
    assert "[bold]upstream[/bold] 503" in captured.err
