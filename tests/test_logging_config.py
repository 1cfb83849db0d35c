"""Tests for logging configuration and runtime settings."""

import pytest
from loguru import logger

from linkscope.core.config import LinkScopeSettings, WireVersion
from linkscope.core.errors import LinkAddressDecodeError
from linkscope.core.logging import configure_logging, scope_matches
from linkscope.datastructures.link_address_codec import decode_link_address


class TestConfigureLogging:
    def test_returns_handler_ids(self):
        handler_ids = configure_logging("INFO")
        assert len(handler_ids) == 1
        logger.remove()

    def test_debug_scopes_add_filtered_handler(self):
        handler_ids = configure_logging("INFO", debug_scopes=("interfaces", " "))
        assert len(handler_ids) == 2
        logger.remove()

    def test_debug_level_needs_no_scope_handler(self):
        handler_ids = configure_logging("DEBUG", debug_scopes=("interfaces",))
        assert len(handler_ids) == 1
        logger.remove()

    def test_scope_matching(self):
        assert scope_matches("linkscope.interfaces", "interfaces")
        assert scope_matches("linkscope.interfaces", "linkscope.interfaces")
        assert scope_matches("linkscope.datastructures.link_address_codec", "datastructures")
        assert not scope_matches("linkscope.interfaces", "linkscope.cli")
        assert not scope_matches("other.interfaces", "linkscope.interfaces")


class TestLinkScopeSettings:
    def test_defaults(self):
        settings = LinkScopeSettings()
        assert settings.log_level == "INFO"
        assert settings.debug_scopes == ()
        assert settings.wire_version is WireVersion.CURRENT
        assert not settings.legacy_compatible

    def test_log_level_normalized(self):
        assert LinkScopeSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            LinkScopeSettings(log_level="chatty")

    def test_wire_version_coerced(self):
        assert LinkScopeSettings(wire_version=1).wire_version is WireVersion.LEGACY


class TestScopedDebugOutput:
    """DEBUG records reach stderr only for the configured scopes."""

    def test_codec_rejections_reach_datastructures_scope(self, capsys):
        configure_logging("INFO", debug_scopes=("datastructures",))
        try:
            with pytest.raises(LinkAddressDecodeError):
                decode_link_address(b"\x07\x04")
            logger.debug("unrelated debug record")
        finally:
            logger.remove()

        err = capsys.readouterr().err
        assert "Rejecting link address wire data" in err
        assert "unrelated debug record" not in err

    def test_other_scope_hides_codec_rejections(self, capsys):
        configure_logging("INFO", debug_scopes=("interfaces",))
        try:
            with pytest.raises(LinkAddressDecodeError):
                decode_link_address(b"\x07\x04")
        finally:
            logger.remove()

        assert "Rejecting link address wire data" not in capsys.readouterr().err
