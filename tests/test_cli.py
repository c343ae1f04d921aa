"""
Tests for the command line entry point (php_discovery/cli.py).
"""

import json
from unittest.mock import patch

from php_discovery.build import Build, Version
from php_discovery.cli import format_build, main
from php_discovery.config import Config
from php_discovery.errors import MissingAPIVersionError, NestedInstallationError


def make_build(binary="/usr/bin/php8.2"):
    return Build(
        version=Version(8, 2, 7, None),
        binary=binary,
        is_debug=False,
        is_thread_safety_enabled=True,
        php_api=20220829,
        zend_api=420220829,
    )


class TestFormatBuild:
    def test_format(self):
        assert format_build(make_build()) == "found build version '8.2.7' => /usr/bin/php8.2"


@patch("php_discovery.cli.load_config", return_value=Config())
class TestMain:
    """Tests for main()."""

    def test_lists_builds(self, mock_config, capsys):
        with patch("php_discovery.cli.discover", return_value=[make_build()]):
            assert main([]) == 0

        out = capsys.readouterr().out
        assert "found build version '8.2.7' => /usr/bin/php8.2" in out

    def test_json_output(self, mock_config, capsys):
        with patch("php_discovery.cli.discover", return_value=[make_build()]):
            assert main(["--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data[0]["version"] == "8.2.7"
        assert data[0]["is_thread_safety_enabled"] is True
        assert set(data[0]["tools"]) == {"config", "cgi", "phpize", "phpdbg"}

    def test_discovery_error_exit_code(self, mock_config, capsys):
        error = NestedInstallationError(MissingAPIVersionError("/usr/bin/php"))
        with patch("php_discovery.cli.discover", side_effect=error):
            assert main([]) == 1

        assert "Failed to retrieve API version" in capsys.readouterr().out

    def test_config_error_exit_code(self, mock_config):
        mock_config.side_effect = ValueError("Could not load config from specified path: x.yml")
        assert main(["--config", "x.yml"]) == 2

    def test_timeout_flag(self, mock_config):
        with patch("php_discovery.cli.discover", return_value=[]) as mock_discover:
            assert main(["--timeout", "15"]) == 0

        assert mock_discover.call_args.kwargs["config"].timeout_seconds == 15

    def test_invalid_timeout_flag(self, mock_config):
        assert main(["--timeout", "0"]) == 2
