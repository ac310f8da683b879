"""
Tests for keyboard glyph normalization.
"""

import pytest


SAMPLES = [
    "",
    "sin(x)",
    "√(x)+π×2÷3",
    "√x",
    "√xy",
    "√π",
    "√√x",
    "√ (x + 1)",
    "√",
    "√+1",
    "2π×√9÷x",
    "x² + ∞",
]


class TestNormalize:
    """Tests for the glyph rewrite rules."""

    def test_all_glyphs(self):
        """Test the full rewrite of root, pi, times and divide."""
        from taylorview.input.normalizer import normalize

        assert normalize("√(x)+π×2÷3") == "sqrt(x)+pi*2/3"

    def test_explicit_root_call(self):
        """Test √( with optional whitespace becomes sqrt(."""
        from taylorview.input.normalizer import normalize

        assert normalize("√(x+1)") == "sqrt(x+1)"
        assert normalize("√ (x+1)") == "sqrt(x+1)"

    def test_implicit_root_takes_one_character(self):
        """Test √ followed by a character wraps only that character."""
        from taylorview.input.normalizer import normalize

        assert normalize("√x") == "sqrt(x)"
        assert normalize("√9") == "sqrt(9)"
        assert normalize("√xy") == "sqrt(x)y"
        assert normalize("√16") == "sqrt(1)6"

    def test_root_of_pi(self):
        """Test √π becomes sqrt(pi)."""
        from taylorview.input.normalizer import normalize

        assert normalize("√π") == "sqrt(pi)"

    def test_dangling_root_is_kept(self):
        """Test a √ with nothing to wrap passes through."""
        from taylorview.input.normalizer import normalize

        assert normalize("√") == "√"
        assert normalize("√+1") == "√+1"

    def test_unmapped_characters_pass_through(self):
        """Test characters without a rule are untouched."""
        from taylorview.input.normalizer import normalize

        assert normalize("x² + ∞") == "x² + ∞"
        assert normalize("exp(x) % 2") == "exp(x) % 2"

    def test_returns_normalized_expression(self):
        """Test the result type is a NormalizedExpression string."""
        from taylorview.input.normalizer import normalize
        from taylorview.models import NormalizedExpression

        result = normalize("π")
        assert isinstance(result, NormalizedExpression)
        assert isinstance(result, str)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        """Test that normalizing twice equals normalizing once."""
        from taylorview.input.normalizer import normalize

        once = normalize(text)
        assert normalize(once) == once

    @pytest.mark.parametrize("text", SAMPLES)
    def test_no_rewritable_glyphs_remain(self, text):
        """Test pi, times and divide never survive normalization."""
        from taylorview.input.normalizer import normalize

        result = normalize(text)
        assert "π" not in result
        assert "×" not in result
        assert "÷" not in result


class TestExpressionNormalizer:
    """Tests for the class interface."""

    def test_custom_instance(self):
        """Test an instance applies the same rules as the module function."""
        from taylorview.input.normalizer import ExpressionNormalizer, normalize

        normalizer = ExpressionNormalizer()
        assert normalizer.normalize("π÷2") == normalize("π÷2") == "pi/2"
