"""Tests for config module."""

from pathlib import Path

import pytest

from treewatch.config import ConfigError, HandlerConfig, WatchConfig, load_config


def write_config(tmp_path, text):
    path = tmp_path / "watch.yaml"
    path.write_text(text)
    return path


class TestWatchConfig:
    """Tests for the watch section."""

    def test_default_values(self):
        config = WatchConfig(root_path=Path("/data"))
        assert config.poll_interval == 1.0
        assert config.max_depth is None
        assert config.follow_symlinks is True

    def test_minimal_file(self, tmp_path):
        path = write_config(tmp_path, "watch:\n  root_path: /srv/data\n")

        config = load_config(path)

        assert config.watch.root_path == Path("/srv/data")
        assert config.watch.poll_interval == 1.0
        assert config.handlers == []

    def test_relative_root_resolves_against_config(self, tmp_path):
        path = write_config(tmp_path, "watch:\n  root_path: data\n")
        config = load_config(path)
        assert config.watch.root_path == (tmp_path / "data").resolve()

    def test_all_fields(self, tmp_path):
        path = write_config(
            tmp_path,
            "watch:\n"
            "  root_path: /srv/data\n"
            "  poll_interval: 0.5\n"
            "  max_depth: 3\n"
            "  follow_symlinks: false\n",
        )

        watch = load_config(path).watch

        assert watch.poll_interval == 0.5
        assert watch.max_depth == 3
        assert watch.follow_symlinks is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "watch: [unclosed\n")
        with pytest.raises(ConfigError, match="parse"):
            load_config(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = write_config(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigError, match="root must be a mapping"):
            load_config(path)

    @pytest.mark.parametrize(
        "body, message",
        [
            ("watch: 5\n", "'watch' section"),
            ("watch:\n  poll_interval: 1\n", "root_path"),
            ("watch:\n  root_path: /d\n  poll_interval: fast\n", "numeric"),
            ("watch:\n  root_path: /d\n  poll_interval: true\n", "numeric"),
            ("watch:\n  root_path: /d\n  poll_interval: 0\n", "positive"),
            ("watch:\n  root_path: /d\n  max_depth: -1\n", "max_depth"),
            ("watch:\n  root_path: /d\n  max_depth: deep\n", "max_depth"),
            ("watch:\n  root_path: /d\n  follow_symlinks: sometimes\n", "follow_symlinks"),
        ],
    )
    def test_invalid_watch_values(self, tmp_path, body, message):
        path = write_config(tmp_path, body)
        with pytest.raises(ConfigError, match=message):
            load_config(path)


class TestHandlersConfig:
    """Tests for the handlers section."""

    def test_handlers_parsed(self, tmp_path):
        path = write_config(
            tmp_path,
            "watch:\n"
            "  root_path: /d\n"
            "handlers:\n"
            "  - event: any\n"
            "    module: treewatch.sample_handlers\n"
            "    function: log_event\n"
            "    options:\n"
            "      level: DEBUG\n"
            "  - event: file_deleted\n"
            "    module: treewatch.sample_handlers\n"
            "    function: log_path\n",
        )

        handlers = load_config(path).handlers

        assert handlers == [
            HandlerConfig(
                event="any",
                module="treewatch.sample_handlers",
                function="log_event",
                options={"level": "DEBUG"},
            ),
            HandlerConfig(
                event="file_deleted",
                module="treewatch.sample_handlers",
                function="log_path",
            ),
        ]

    def test_null_handlers_section(self, tmp_path):
        path = write_config(tmp_path, "watch:\n  root_path: /d\nhandlers:\n")
        assert load_config(path).handlers == []

    @pytest.mark.parametrize(
        "handlers, message",
        [
            ("handlers: {}\n", "must be a list"),
            ("handlers:\n  - nope\n", r"handlers\[0\] must be a mapping"),
            ("handlers:\n  - event: file_moved\n    module: m\n    function: f\n", "event must be one of"),
            ("handlers:\n  - event: any\n    module: m\n", "'module' and 'function'"),
            ("handlers:\n  - event: any\n    module: m\n    function: f\n    options: [1]\n", "options"),
            (
                "handlers:\n"
                "  - event: any\n    module: m\n    function: f\n"
                "  - event: any\n    module: m\n    function: g\n",
                "duplicates",
            ),
        ],
    )
    def test_invalid_handlers(self, tmp_path, handlers, message):
        path = write_config(tmp_path, "watch:\n  root_path: /d\n" + handlers)
        with pytest.raises(ConfigError, match=message):
            load_config(path)
