import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from beam_mm import __version__
from beam_mm.core.errors import BeamMMError
from beam_mm.core.mod_manager import ModManager
from beam_mm.core.paths import PathManager
from beam_mm.core.settings import SettingsManager
from beam_mm.utils.prompts import confirm
from beam_mm.utils.status import Status

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beammm",
        description=(
            "BeamMM CLI - A mod manager backend and command line application "
            "for the game BeamNG.drive"
        ),
    )
    parser.add_argument(
        "mods", nargs="*", help="Select the mods for the chosen operation"
    )
    parser.add_argument("--create-preset", metavar="NAME", help="Create a mod preset")
    parser.add_argument(
        "--delete-preset", metavar="NAME", help="Permanently delete a preset"
    )
    parser.add_argument("--preset-add", metavar="PRESET", help="Add mods to a preset")
    parser.add_argument(
        "--preset-remove", metavar="PRESET", help="Remove mods from a preset"
    )
    parser.add_argument(
        "-l", "--list-presets", action="store_true", help="List presets"
    )
    parser.add_argument(
        "--enable",
        action="store_true",
        help='Enable mods - pass "all" to enable all mods',
    )
    parser.add_argument(
        "--disable",
        action="store_true",
        help='Disable mods - pass "all" to disable all mods',
    )
    parser.add_argument("--enable-preset", metavar="PRESET", help="Enable a preset")
    parser.add_argument("--disable-preset", metavar="PRESET", help="Disable a preset")
    parser.add_argument(
        "-y",
        "--confirm-all",
        action="store_true",
        help="Answer yes to all confirmation prompts",
    )
    parser.add_argument(
        "--custom-data-dir",
        metavar="DIR",
        type=Path,
        help="Choose a custom BeamNG data directory",
    )
    parser.add_argument("--list-mods", action="store_true", help="List installed mods")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _status_word(enabled: bool) -> str:
    return "[green]enabled [/green]" if enabled else "[red]disabled[/red]"


def run(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    app_dir: Path | None = None,
) -> int:
    """
    Parse arguments and perform one BeamMM invocation.

    Returns:
        The process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    out = Console(file=stdout, highlight=False, soft_wrap=True)
    err = Console(file=stderr or sys.stderr, highlight=False, soft_wrap=True)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    mods = list(args.mods)
    needs_mods = [
        flag
        for flag, given in (
            ("--enable", args.enable),
            ("--disable", args.disable),
            ("--preset-add", args.preset_add),
            ("--preset-remove", args.preset_remove),
        )
        if given
    ]
    if needs_mods and not mods:
        parser.error(f"{', '.join(needs_mods)} requires at least one mod")

    try:
        path_manager = PathManager(app_dir=app_dir)
        settings = SettingsManager(path_manager.settings_file())
        path_manager.custom_data_dir = args.custom_data_dir or settings.get_path(
            "data_dir"
        )
        confirm_all = args.confirm_all or settings.get_bool("confirm_all", False)

        def ask(msg: str, default: bool) -> bool:
            return confirm(stdin, stdout, msg, default, confirm_all)

        manager = ModManager.from_paths(path_manager)

        if args.create_preset is not None:
            preset = manager.create_preset(args.create_preset, mods)
            out.print(f"Preset '{escape(preset.name)}' created successfully.")
            if preset.mods:
                out.print("With mods:")
                for mod_id in preset.mods:
                    out.print(f"  - {escape(mod_id)}")
            else:
                out.print("No mods added to the preset.")

        if args.delete_preset is not None:
            if ask(f"Are you sure you want to delete preset '{args.delete_preset}'?", False):
                manager.delete_preset(args.delete_preset)
                out.print(f"Preset '{escape(args.delete_preset)}' deleted.")

        if args.enable_preset is not None:
            manager.enable_preset(args.enable_preset)
        if args.disable_preset is not None:
            manager.disable_preset(args.disable_preset)

        all_mods = bool(mods) and mods[0].lower() == "all"
        if args.enable:
            if not all_mods:
                manager.set_mods_enabled(mods, True)
            elif ask("Are you sure you would like to enable all mods?", True):
                manager.set_all_mods_enabled(True)
        if args.disable:
            if not all_mods:
                manager.set_mods_enabled(mods, False)
            elif ask("Are you sure you would like to disable all mods?", False):
                manager.set_all_mods_enabled(False)

        if args.preset_add is not None:
            manager.add_to_preset(args.preset_add, mods)
        if args.preset_remove is not None:
            manager.remove_from_preset(args.preset_remove, mods)

        result = manager.reconcile()
        for ref in result.stale:
            err.print(
                f"[yellow]Warning:[/yellow] preset '{escape(ref.preset)}' references "
                f"mod '{escape(ref.mod_id)}' which is not installed; skipped"
            )

        if args.list_presets:
            for summary in manager.list_presets():
                out.print(
                    f"{_status_word(summary.enabled)} {escape(summary.name)} "
                    f"({summary.mod_count} mods)"
                )
        if args.list_mods:
            for mod in manager.list_mods():
                out.print(f"{_status_word(mod.enabled)} {escape(mod.id)}")

    except BeamMMError as e:
        log.debug("Command failed", exc_info=True)
        err.print(f"[red]Error:[/red] {escape(str(e))}")
        return Status.for_error(e)

    return Status.SUCCESS
