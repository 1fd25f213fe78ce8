from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Optional

import yaml

from .config import InstallerConfig, load_config
from .context import InstallCtx
from .errors import InvalidRequest
from .lib.accounts import lookup_account
from .lib.command import Runner, run_cmd
from .lib.env import UPSTREAM
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .models import STATUS_ALREADY_INSTALLED, STATUS_FAILED, ErrorReport, InstallOutcome, InstallRequest
from .pipeline import run_pipeline
from .state_store import save_outcome
from .steps import (
    ConfigureStep,
    FetchAndRelocateStep,
    InstallToolingStep,
    PreconditionStep,
    ProvisionDirectoriesStep,
)

logger = logging.getLogger(__name__)

EXAMPLES = """\
examples:
  install Homebrew, fetching the Command Line Tools through softwareupdate:
    brew-installer install --user someuser

  install Homebrew with the Command Line Tools from a local dmg:
    brew-installer install --user someuser \\
        --tools-url https://somewhere.example.com/downloads/command_line_tools.dmg \\
        --tools-pkg-name 'Command Line Tools.pkg'
"""


def build_steps():
    return [
        PreconditionStep(),
        ProvisionDirectoriesStep(),
        InstallToolingStep(),
        FetchAndRelocateStep(),
        ConfigureStep(),
    ]


def run(
    request: InstallRequest,
    *,
    config: Optional[InstallerConfig] = None,
    log_path: Optional[str] = None,
    report_path: Optional[str] = None,
    cancel: Optional[threading.Event] = None,
    runner: Runner = run_cmd,
) -> InstallOutcome:
    """Install Homebrew for `request.user` unless it is already installed."""

    if log_path:
        configure_logging(log_path=log_path)
    cfg = config or InstallerConfig()

    try:
        request.validate()
        account = lookup_account(request.user)
    except InvalidRequest as e:
        logger.error("Invalid request: %s", e)
        outcome = InstallOutcome(status=STATUS_FAILED, attempted=False, error=ErrorReport.from_exception(e))
    else:
        logger.info(
            "Installing Homebrew for %s under %s (archive=%s, brew_source=%s, dry_run=%s)",
            account.name,
            cfg.prefix,
            cfg.archive_url,
            request.brew_source,
            cfg.dry_run,
        )
        ctx = InstallCtx(request=request, cfg=cfg, account=account, runner=runner)
        try:
            outcome = run_pipeline(ctx=ctx, steps=build_steps(), cancel=cancel)
        except Exception:
            logger.exception("Installer failed")
            raise

    if report_path:
        save_outcome(report_path, outcome)
    return outcome


def _install_cancel_handlers(cancel: threading.Event) -> dict:
    def _handler(signum, frame):
        logger.warning("Received signal %s; stopping before the next step", signum)
        cancel.set()

    return {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}


def _load_cli_config(args: argparse.Namespace) -> Optional[InstallerConfig]:
    try:
        return load_config(args.config).with_overrides(prefix=args.prefix)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: cannot load config {args.config}: {e}", file=sys.stderr)
        return None


def cmd_install(args: argparse.Namespace) -> int:
    cfg = _load_cli_config(args)
    if cfg is None:
        return 2
    if args.dry_run:
        cfg = cfg.with_overrides(dry_run=True)
    request = InstallRequest(
        user=args.user,
        tools_url=args.tools_url,
        tools_pkg_name=args.tools_pkg_name,
        brew_source=args.brew_source,
    )

    cancel = threading.Event()
    previous = _install_cancel_handlers(cancel)
    try:
        outcome = run(request, config=cfg, log_path=args.log, report_path=args.report, cancel=cancel)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if outcome.status == STATUS_ALREADY_INSTALLED:
        print(f"Homebrew already installed: {outcome.skipped_reason}")
        return 0
    if outcome.ok:
        print(f"Homebrew installed ({', '.join(outcome.steps_completed)})")
        for w in outcome.warnings:
            print(f"warning: {w}", file=sys.stderr)
        return 0

    assert outcome.error is not None
    print(outcome.error.describe(), file=sys.stderr)
    return 2 if outcome.error.kind == InvalidRequest.kind else 1


def cmd_check(args: argparse.Namespace) -> int:
    cfg = _load_cli_config(args)
    if cfg is None:
        return 2
    marker = cfg.marker_path
    if marker.exists() or marker.is_symlink():
        print(f"installed: {marker}")
        return 0
    print(f"not installed: {marker} missing")
    return 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="brew-installer",
        description="Install the Homebrew package manager on macOS.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--config", default=None, help="Installer config (YAML)")
    p.add_argument("--prefix", default=None, help="Installation prefix (default: /usr/local)")

    # Accepted after the subcommand too; SUPPRESS keeps a value given before it.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=argparse.SUPPRESS, help="Installer config (YAML)")
    common.add_argument("--prefix", default=argparse.SUPPRESS, help="Installation prefix (default: /usr/local)")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("install", parents=[common], help="Install Homebrew unless already present")
    sp.add_argument("--user", required=True, help="User to install Homebrew as (never root)")
    sp.add_argument("--tools-url", default=None, help="URL of a Command Line Tools for Xcode dmg")
    sp.add_argument("--tools-pkg-name", default=None, help="Name of the pkg inside the dmg at --tools-url")
    sp.add_argument("--brew-source", default=UPSTREAM.brew_source, help="URL of a Homebrew installer (recorded only)")
    sp.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    sp.add_argument("--report", default=None, help="Write the outcome to this path (json|yaml)")
    sp.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    sp.set_defaults(func=cmd_install)

    sp = sub.add_parser("check", parents=[common], help="Report whether Homebrew is already installed")
    sp.set_defaults(func=cmd_check)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
