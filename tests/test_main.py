# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Tests for application wiring and the command line.
"""

import sys

import pytest


class TestBuildModel:
    """Test creating the model from configuration."""

    def test_uses_config_timezone(self, sample_config_yaml):
        """The configured timezone is applied."""
        from globaltime.config import load_config
        from globaltime.main import build_model

        model = build_model(load_config(str(sample_config_yaml)))

        assert model.timezone_name == "Europe/Berlin"

    def test_override_wins(self, sample_config_yaml):
        """A timezone override replaces the configured one."""
        from globaltime.config import load_config
        from globaltime.main import build_model

        model = build_model(load_config(str(sample_config_yaml)), "Asia/Tokyo")

        assert model.timezone_name == "Asia/Tokyo"

    def test_invalid_timezone_falls_back(self, caplog):
        """An unknown configured timezone falls back to UTC."""
        from globaltime.config import GlobalTimeConfig
        from globaltime.main import build_model

        config = GlobalTimeConfig()
        config.clock.timezone = "Not/AZone"

        model = build_model(config)

        assert model.timezone_name == "UTC"
        assert any("falling back" in r.message for r in caplog.records)

    def test_region_name_falls_back(self):
        """A region directory name such as "America" falls back to UTC."""
        from globaltime.config import GlobalTimeConfig
        from globaltime.main import build_model

        config = GlobalTimeConfig()
        config.clock.timezone = "America"

        model = build_model(config)

        assert model.timezone_name == "UTC"

    def test_hands_from_config(self):
        """Hand settings are copied onto the model's hands."""
        from globaltime.config import GlobalTimeConfig
        from globaltime.main import build_model

        config = GlobalTimeConfig()
        config.hands.second.length_ratio = 1.05
        config.hands.hour.width = 7

        model = build_model(config)

        assert model.second_hand.length_ratio == 1.05
        assert model.hour_hand.width == 7
        assert [h.name for h in model.hands] == ["hour", "minute", "second"]


class TestLayout:
    """Test window layout helpers."""

    def test_face_fits_window(self):
        """The face fits the smaller window dimension with a margin."""
        from globaltime.main import face_diameter

        diameter = face_diameter(480, 520, caption=False)

        assert diameter < 480
        assert diameter > 400

    def test_caption_leaves_room(self):
        """Reserving a caption line shrinks a height-bound face."""
        from globaltime.main import face_diameter

        assert face_diameter(600, 400, caption=True) < face_diameter(600, 400, caption=False)


class TestTimezoneCycling:
    """Test switching between configured timezones."""

    @pytest.fixture
    def app(self, sample_config_yaml, monkeypatch):
        from globaltime.main import GlobalTime

        # Keep pytest's own SIGINT handling intact
        monkeypatch.setattr("signal.signal", lambda *args: None)
        app = GlobalTime(config_path=str(sample_config_yaml))
        assert app._load_config()
        assert app._init_clock()
        return app

    def test_cycle_forward(self, app):
        """Right arrow moves to the next zone in the list."""
        assert app.model.timezone_name == "Europe/Berlin"
        assert app.cycle_timezone(1) == "Asia/Tokyo"
        assert app.cycle_timezone(1) == "UTC"

    def test_cycle_backward(self, app):
        """Left arrow moves to the previous zone."""
        assert app.cycle_timezone(-1) == "UTC"
        assert app.cycle_timezone(-1) == "Asia/Tokyo"

    def test_cycle_skips_invalid_entry(self, app, caplog):
        """An unknown zone in the list is skipped instead of blocking."""
        app.config.clock.timezones = ["UTC", "Bad/Zone", "America", "Asia/Tokyo"]
        app.model.set_timezone("UTC")

        assert app.cycle_timezone(1) == "Asia/Tokyo"
        assert app.cycle_timezone(1) == "UTC"
        assert app.cycle_timezone(-1) == "Asia/Tokyo"
        assert any("Bad/Zone" in r.message for r in caplog.records)

    def test_cycle_all_invalid_keeps_current(self, app):
        """With nothing valid to switch to, the current zone stays."""
        app.config.clock.timezones = ["Bad/Zone", "Also/Bad"]

        assert app.cycle_timezone(1) == "Europe/Berlin"
        assert app.model.timezone_name == "Europe/Berlin"

    def test_cycle_resamples(self, app):
        """Switching zones recomputes the hands and requests a redraw."""
        app._needs_redraw.clear()
        app.cycle_timezone(1)
        assert app._needs_redraw.is_set()
        assert app._last_time == app.model.time()


class TestSnapshot:
    """Test headless rendering to a file."""

    def test_snapshot_writes_image(self, temp_dir, new_year_utc):
        """A PNG of the requested size is written."""
        pygame = pytest.importorskip("pygame")
        from globaltime.config import GlobalTimeConfig
        from globaltime.main import snapshot

        path = snapshot(GlobalTimeConfig(), str(temp_dir / "out" / "clock.png"),
                        now=new_year_utc, diameter=120)

        image = pygame.image.load(path)
        assert image.get_size() == (120, 120)


class TestCommandLine:
    """Test the argument handling of main()."""

    def test_version(self, monkeypatch, capsys):
        """--version prints the version."""
        from globaltime.main import main
        from globaltime import __version__

        monkeypatch.setattr(sys, "argv", ["globaltime", "--version"])

        assert main() == 0
        assert __version__ in capsys.readouterr().out

    def test_list_timezones(self, monkeypatch, capsys):
        """--list-timezones prints IANA names."""
        from globaltime.main import main

        monkeypatch.setattr(sys, "argv", ["globaltime", "--list-timezones"])

        assert main() == 0
        assert "Europe/Berlin" in capsys.readouterr().out.splitlines()

    def test_invalid_timezone_argument(self, monkeypatch, capsys):
        """An unknown --timezone exits with status 2."""
        from globaltime.main import main

        monkeypatch.setattr(sys, "argv", ["globaltime", "-t", "Not/AZone"])

        assert main() == 2
        assert "Not/AZone" in capsys.readouterr().out

    def test_region_timezone_argument(self, monkeypatch, capsys):
        """A region directory passed to --timezone exits with status 2."""
        from globaltime.main import main

        monkeypatch.setattr(sys, "argv", ["globaltime", "-t", "America"])

        assert main() == 2
        assert "America" in capsys.readouterr().out

    def test_snapshot_argument(self, monkeypatch, temp_dir, sample_config_yaml):
        """--snapshot renders a file and exits without opening a window."""
        pytest.importorskip("pygame")
        from globaltime.main import main

        out = temp_dir / "snap.png"
        monkeypatch.setattr(sys, "argv", [
            "globaltime", "-c", str(sample_config_yaml),
            "-t", "Asia/Tokyo", "--snapshot", str(out)
        ])

        assert main() == 0
        assert out.exists()
