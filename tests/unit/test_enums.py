"""Unit tests for StrEnum definitions."""

from typed_env.enums import Scope


class TestScope:
    """Tests for Scope enum."""

    def test_values(self):
        """Scope members should have lowercase string values."""
        assert Scope.PROCESS == "process"
        assert Scope.USER == "user"
        assert Scope.MACHINE == "machine"

    def test_all_members(self):
        """Scope should have exactly 3 members."""
        assert len(Scope) == 3
        assert set(Scope) == {Scope.PROCESS, Scope.USER, Scope.MACHINE}

    def test_lookup_by_value(self):
        """Scopes can be constructed from their string value."""
        assert Scope("machine") is Scope.MACHINE
