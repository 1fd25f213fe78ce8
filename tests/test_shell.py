"""Tests for shell detection and profile editing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from brew_installer.errors import CommandTimeout
from brew_installer.lib.accounts import Account
from brew_installer.lib.shell import append_line, detect_shell, path_export_line, profile_for_shell

from .conftest import FakeRunner, fail, shell_reply

LINE = 'export PATH="/usr/local/bin:$PATH"'


@pytest.fixture
def zsh_account(tmp_path: Path) -> Account:
    return Account(name="alice", uid=os.getuid(), gid=os.getgid(), home=str(tmp_path), shell="/bin/zsh")


def test_path_export_line() -> None:
    """Test the exported PATH line format."""
    assert path_export_line("/usr/local/bin") == LINE


class TestDetectShell:
    def test_uses_shell_env(self, zsh_account: Account) -> None:
        """Test $SHELL from the user's environment wins."""
        runner = FakeRunner({"/bin/sh": shell_reply("/bin/bash")})

        assert detect_shell(runner, zsh_account) == "/bin/bash"
        assert runner.find("/bin/sh -c").user == "alice"

    def test_empty_falls_back_to_login_shell(self, zsh_account: Account) -> None:
        """Test an empty $SHELL falls back to the passwd shell."""
        runner = FakeRunner({"/bin/sh": shell_reply("")})

        assert detect_shell(runner, zsh_account) == "/bin/zsh"

    def test_failure_falls_back(self, zsh_account: Account) -> None:
        """Test a failing probe falls back instead of raising."""
        runner = FakeRunner({"/bin/sh": fail()})

        assert detect_shell(runner, zsh_account) == "/bin/zsh"

    def test_timeout_falls_back(self, zsh_account: Account) -> None:
        """Test a hung probe falls back instead of raising."""

        def _hang(argv, cwd):
            raise CommandTimeout("slow", argv=argv, timeout=1)

        assert detect_shell(FakeRunner({"/bin/sh": _hang}), zsh_account) == "/bin/zsh"


class TestProfileForShell:
    @pytest.mark.parametrize("shell", ["/bin/zsh", "/usr/local/bin/zsh", "zsh"])
    def test_zsh(self, shell: str) -> None:
        """Test anything matching zsh uses .zshrc."""
        assert profile_for_shell(shell, "/Users/alice") == Path("/Users/alice/.zshrc")

    @pytest.mark.parametrize("shell", ["/bin/bash", "/bin/sh", "", "/opt/fish"])
    def test_default(self, shell: str) -> None:
        """Test everything else uses .bash_profile."""
        assert profile_for_shell(shell, "/Users/alice") == Path("/Users/alice/.bash_profile")


class TestAppendLine:
    def test_creates_profile(self, tmp_path: Path) -> None:
        """Test a missing profile is created with the line."""
        profile = tmp_path / ".zshrc"

        assert append_line(profile, LINE, uid=os.getuid(), gid=os.getgid()) is True
        assert profile.read_text() == LINE + "\n"

    def test_appends_after_unterminated_content(self, tmp_path: Path) -> None:
        """Test existing content without a trailing newline is preserved."""
        profile = tmp_path / ".bash_profile"
        profile.write_text("alias ll='ls -l'")

        append_line(profile, LINE, uid=os.getuid(), gid=os.getgid())

        assert profile.read_text() == "alias ll='ls -l'\n" + LINE + "\n"

    def test_does_not_duplicate(self, tmp_path: Path) -> None:
        """Test a second append is a no-op."""
        profile = tmp_path / ".bash_profile"
        append_line(profile, LINE, uid=os.getuid(), gid=os.getgid())

        assert append_line(profile, LINE, uid=os.getuid(), gid=os.getgid()) is False
        assert profile.read_text().count(LINE) == 1

    def test_dry_run(self, tmp_path: Path) -> None:
        """Test dry run writes nothing."""
        profile = tmp_path / ".bash_profile"

        assert append_line(profile, LINE, uid=os.getuid(), gid=os.getgid(), dry_run=True) is True
        assert not profile.exists()

    def test_non_utf8_profile_is_preserved(self, tmp_path: Path) -> None:
        """Test a Latin-1 profile gets the line appended and keeps its bytes."""
        profile = tmp_path / ".bash_profile"
        profile.write_bytes(b"# caf\xe9\n")

        assert append_line(profile, LINE, uid=os.getuid(), gid=os.getgid()) is True
        assert profile.read_bytes() == b"# caf\xe9\n" + LINE.encode() + b"\n"
        assert append_line(profile, LINE, uid=os.getuid(), gid=os.getgid()) is False
