"""Tests for tabby._errors."""

import pytest

from tabby._errors import ConfigError, RenderError, ServeError, TabbyError


class TestErrorHierarchy:
    """All tabby errors inherit from TabbyError."""

    def test_tabby_error_is_exception(self) -> None:
        assert issubclass(TabbyError, Exception)

    @pytest.mark.parametrize("error_cls", [ConfigError, RenderError, ServeError])
    def test_inherits_from_base(self, error_cls: type[TabbyError]) -> None:
        assert issubclass(error_cls, TabbyError)

    def test_catch_all_tabby_errors(self) -> None:
        for error_cls in (ConfigError, RenderError, ServeError):
            with pytest.raises(TabbyError, match="boom"):
                raise error_cls("boom")
