"""
Unit tests for optimizer configuration.
"""

import pytest

from prefold.compiler.config import OptimizerConfig


class TestOptimizerConfig:
    """Tests for OptimizerConfig defaults and validation."""

    def test_defaults(self):
        """Defaults match the language's conventions."""
        config = OptimizerConfig.default()
        assert config.output_symbol == "output"
        assert config.type_keywords == ("int", "bool")
        assert config.default_type == "int"
        assert config.filename is None

    def test_with_output(self):
        """with_output returns a modified copy."""
        config = OptimizerConfig()
        other = config.with_output("result")
        assert other.output_symbol == "result"
        assert config.output_symbol == "output"

    def test_is_type_keyword(self):
        """Only configured keywords are type keywords."""
        config = OptimizerConfig()
        assert config.is_type_keyword("int")
        assert config.is_type_keyword("bool")
        assert not config.is_type_keyword("float")

    @pytest.mark.parametrize("symbol", ["", "1abc", "out put", "out_put"])
    def test_invalid_output_symbol(self, symbol):
        """The root symbol must be an identifier."""
        with pytest.raises(ValueError, match="Invalid output symbol"):
            OptimizerConfig(output_symbol=symbol)

    def test_default_type_must_be_keyword(self):
        """The synthesized type has to be a recognised keyword."""
        with pytest.raises(ValueError, match="Default type"):
            OptimizerConfig(default_type="long")

    def test_requires_keywords(self):
        """An empty keyword list is rejected."""
        with pytest.raises(ValueError, match="type keyword"):
            OptimizerConfig(type_keywords=())

    def test_frozen(self):
        """Configurations are immutable."""
        config = OptimizerConfig()
        with pytest.raises(AttributeError):
            config.default_type = "bool"
